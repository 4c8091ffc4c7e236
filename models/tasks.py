from core.database import Base
from sqlalchemy import Column, Integer, String, Text, Date, ForeignKey, Enum
from sqlalchemy.orm import relationship
from models.mixins import CreatedAtMixin, UpdatedAtMixin

TASK_STATUSES = ("pending", "in_progress", "done")
TASK_PRIORITIES = ("low", "medium", "high", "urgent")

class Task(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "tasks"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    #relationships
    project = relationship("Project", back_populates="tasks")
    user = relationship("User", back_populates="tasks")

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(Enum(*TASK_STATUSES, name="task_status"), default="pending", nullable=False)
    priority = Column(Enum(*TASK_PRIORITIES, name="task_priority"), default="medium", nullable=False)
    due_date = Column(Date, nullable=True)
