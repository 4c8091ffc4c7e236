from typing import Optional
from fastapi import APIRouter
from starlette import status
from schemas.task_schemas import (CreateTaskRequest, TaskDetail, TaskPriority, TaskStatus,
                                  UpdateTaskRequest)
from services.task_service import TaskService
from utils.deps import db_dependency, user_dependency
from utils.responses import success_response


router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"]
)


@router.get("", status_code=status.HTTP_200_OK)
async def list_tasks(current: user_dependency, db: db_dependency,
                     project_id: Optional[int] = None,
                     status: Optional[TaskStatus] = None,
                     priority: Optional[TaskPriority] = None):
    """
    List the user's tasks, optionally filtered by project, status and priority.
    """
    tasks = TaskService.list_for_user(current.user, db, project_id=project_id,
                                      status=status, priority=priority)
    return success_response(
        data={"tasks": [TaskDetail.model_validate(task) for task in tasks]},
        message="Tasks retrieved successfully"
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(body: CreateTaskRequest, current: user_dependency, db: db_dependency):
    task = TaskService.create(current.user, body, db)
    return success_response(
        data={"task": TaskDetail.model_validate(task)},
        message="Task created successfully",
        status_code=status.HTTP_201_CREATED
    )


@router.get("/{task_id}", status_code=status.HTTP_200_OK)
async def show_task(task_id: int, current: user_dependency, db: db_dependency):
    task = TaskService.get_owned(current.user, task_id, db)
    return success_response(data={"task": TaskDetail.model_validate(task)},
                            message="Task retrieved successfully")


@router.put("/{task_id}", status_code=status.HTTP_200_OK)
async def update_task(task_id: int, body: UpdateTaskRequest,
                      current: user_dependency, db: db_dependency):
    task = TaskService.update(current.user, task_id, body, db)
    return success_response(data={"task": TaskDetail.model_validate(task)},
                            message="Task updated successfully")


@router.delete("/{task_id}", status_code=status.HTTP_200_OK)
async def delete_task(task_id: int, current: user_dependency, db: db_dependency):
    TaskService.delete(current.user, task_id, db)
    return success_response(message="Task deleted successfully")
