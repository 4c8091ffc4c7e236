from datetime import date, datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TaskStatus = Literal["pending", "in_progress", "done"]
TaskPriority = Literal["low", "medium", "high", "urgent"]


def validate_due_date(value: Optional[date]) -> Optional[date]:
    if value is not None and value < date.today():
        raise ValueError('The due date must be today or in the future.')
    return value


class CreateTaskRequest(BaseModel):
    project_id: int
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    status: TaskStatus = "pending"
    priority: TaskPriority = "medium"
    due_date: Optional[date] = None

    @field_validator('due_date')
    @classmethod
    def check_due_date(cls, value):
        return validate_due_date(value)


class UpdateTaskRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[date] = None

    @field_validator('due_date')
    @classmethod
    def check_due_date(cls, value):
        return validate_due_date(value)

    @model_validator(mode='after')
    def required_fields_not_null(self):
        # due_date may be cleared; everything else is NOT NULL in the table
        for field in ('title', 'description', 'status', 'priority'):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f'The {field} field may not be null.')
        return self


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    user_id: int
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime


class TaskProject(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class TaskDetail(TaskOut):
    project: TaskProject
