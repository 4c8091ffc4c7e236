from typing import List, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session
from core.exceptions import NotFound
from models.projects import Project
from models.tasks import Task
from models.users import User
from schemas.project_schemas import CreateProjectRequest, UpdateProjectRequest
from services.policies import authorize_owner
from utils.logger import get_logger

logger = get_logger(__name__)


class ProjectService:

    @staticmethod
    def list_for_user(user: User, db: Session) -> List[Tuple[Project, int]]:
        """Returns the user's projects, newest first, each with its task count."""
        task_counts = (
            db.query(Task.project_id, func.count(Task.id).label("tasks_count"))
            .group_by(Task.project_id)
            .subquery()
        )
        rows = (
            db.query(Project, func.coalesce(task_counts.c.tasks_count, 0))
            .outerjoin(task_counts, task_counts.c.project_id == Project.id)
            .filter(Project.user_id == user.id)
            .order_by(Project.created_at.desc(), Project.id.desc())
            .all()
        )
        return [(project, count) for project, count in rows]

    @staticmethod
    def create(user: User, body: CreateProjectRequest, db: Session) -> Project:
        project = Project(user_id=user.id, **body.model_dump())
        db.add(project)
        db.commit()
        db.refresh(project)

        logger.info("Project created", extra={"user_id": user.id, "project_id": project.id})
        return project

    @staticmethod
    def get_owned(user: User, project_id: int, db: Session, action: str = "view") -> Project:
        project = db.get(Project, project_id)
        if project is None:
            raise NotFound("Project not found")

        authorize_owner(user, project, action)
        return project

    @staticmethod
    def update(user: User, project_id: int, body: UpdateProjectRequest, db: Session) -> Project:
        project = ProjectService.get_owned(user, project_id, db, action="update")

        for field, value in body.model_dump(exclude_unset=True).items():
            setattr(project, field, value)

        db.commit()
        db.refresh(project)
        return project

    @staticmethod
    def delete(user: User, project_id: int, db: Session) -> None:
        project = ProjectService.get_owned(user, project_id, db, action="delete")
        db.delete(project)
        db.commit()

        logger.info("Project deleted", extra={"user_id": user.id, "project_id": project_id})
