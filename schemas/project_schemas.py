from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from schemas.task_schemas import TaskOut


class CreateProjectRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)


class UpdateProjectRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)

    @model_validator(mode='after')
    def name_not_null(self):
        if 'name' in self.model_fields_set and self.name is None:
            raise ValueError('The project name may not be null.')
        return self


class ProjectOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ProjectSummary(ProjectOut):
    tasks_count: int = 0


class ProjectDetail(ProjectOut):
    tasks: List[TaskOut] = []
