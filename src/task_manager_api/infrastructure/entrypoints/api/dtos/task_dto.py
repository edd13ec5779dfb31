from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


class CreateTaskRequest(BaseModel):
    text: StrictStr

    @field_validator("text")
    @classmethod
    def text_must_not_be_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Task text is required")
        return value


class TaskResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    text: str
    completed: bool
    created_at: datetime = Field(alias="createdAt")


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
