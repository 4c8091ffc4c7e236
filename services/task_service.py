from typing import List, Optional
from sqlalchemy.orm import Session, joinedload
from core.exceptions import NotFound, ValidationError
from models.projects import Project
from models.tasks import Task
from models.users import User
from schemas.task_schemas import CreateTaskRequest, UpdateTaskRequest
from services.policies import authorize_owner
from utils.logger import get_logger

logger = get_logger(__name__)


class TaskService:

    @staticmethod
    def list_for_user(user: User, db: Session, project_id: Optional[int] = None,
                      status: Optional[str] = None, priority: Optional[str] = None) -> List[Task]:
        query = db.query(Task).options(joinedload(Task.project)).filter(Task.user_id == user.id)

        if project_id is not None:
            query = query.filter(Task.project_id == project_id)
        if status is not None:
            query = query.filter(Task.status == status)
        if priority is not None:
            query = query.filter(Task.priority == priority)

        return query.order_by(Task.created_at.desc(), Task.id.desc()).all()

    @staticmethod
    def create(user: User, body: CreateTaskRequest, db: Session) -> Task:
        """
        Creates a task in one of the user's projects.

        Raises:
            ValidationError: project does not exist
            Forbidden: project belongs to someone else
        """
        project = db.get(Project, body.project_id)
        if project is None:
            raise ValidationError.for_field("project_id", "The selected project does not exist.")

        authorize_owner(user, project, "create_task")

        task = Task(user_id=user.id, **body.model_dump(exclude_unset=True))
        db.add(task)
        db.commit()
        db.refresh(task)

        logger.info("Task created", extra={"user_id": user.id, "task_id": task.id, "project_id": project.id})
        return task

    @staticmethod
    def get_owned(user: User, task_id: int, db: Session, action: str = "view") -> Task:
        task = db.get(Task, task_id)
        if task is None:
            raise NotFound("Task not found")

        authorize_owner(user, task, action)
        return task

    @staticmethod
    def update(user: User, task_id: int, body: UpdateTaskRequest, db: Session) -> Task:
        task = TaskService.get_owned(user, task_id, db, action="update")

        for field, value in body.model_dump(exclude_unset=True).items():
            setattr(task, field, value)

        db.commit()
        db.refresh(task)
        return task

    @staticmethod
    def delete(user: User, task_id: int, db: Session) -> None:
        task = TaskService.get_owned(user, task_id, db, action="delete")
        db.delete(task)
        db.commit()

        logger.info("Task deleted", extra={"user_id": user.id, "task_id": task_id})
