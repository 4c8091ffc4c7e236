from fastapi import APIRouter
from starlette import status
from schemas.project_schemas import (CreateProjectRequest, ProjectDetail, ProjectSummary,
                                     UpdateProjectRequest)
from services.project_service import ProjectService
from utils.deps import db_dependency, user_dependency
from utils.responses import success_response


router = APIRouter(
    prefix="/api/projects",
    tags=["projects"]
)


@router.get("", status_code=status.HTTP_200_OK)
async def list_projects(current: user_dependency, db: db_dependency):
    rows = ProjectService.list_for_user(current.user, db)
    projects = [
        ProjectSummary.model_validate(project).model_copy(update={"tasks_count": count})
        for project, count in rows
    ]
    return success_response(data={"projects": projects}, message="Projects retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(body: CreateProjectRequest, current: user_dependency, db: db_dependency):
    project = ProjectService.create(current.user, body, db)
    return success_response(
        data={"project": ProjectDetail.model_validate(project)},
        message="Project created successfully",
        status_code=status.HTTP_201_CREATED
    )


@router.get("/{project_id}", status_code=status.HTTP_200_OK)
async def show_project(project_id: int, current: user_dependency, db: db_dependency):
    project = ProjectService.get_owned(current.user, project_id, db)
    return success_response(data={"project": ProjectDetail.model_validate(project)},
                            message="Project retrieved successfully")


@router.put("/{project_id}", status_code=status.HTTP_200_OK)
async def update_project(project_id: int, body: UpdateProjectRequest,
                         current: user_dependency, db: db_dependency):
    project = ProjectService.update(current.user, project_id, body, db)
    return success_response(data={"project": ProjectDetail.model_validate(project)},
                            message="Project updated successfully")


@router.delete("/{project_id}", status_code=status.HTTP_200_OK)
async def delete_project(project_id: int, current: user_dependency, db: db_dependency):
    ProjectService.delete(current.user, project_id, db)
    return success_response(message="Project deleted successfully")
