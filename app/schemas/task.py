#app/schemas/task.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

class TaskBase(BaseModel):
    """
    TaskBase — базовая схема задачи (используется для create/read).
    """
    name: str = Field(..., min_length=1, examples=["Write report"], description="Название задачи")
    deadline: datetime = Field(..., examples=["2030-12-31T18:00:00Z"], description="Дедлайн")
    description: str = Field("", description="Описание задачи")
    completed: bool = Field(False, description="Задача завершена?")

class TaskCreate(TaskBase):
    """
    TaskCreate — создание задачи; исполнитель необязателен.
    """
    assigned_user: Optional[int] = Field(None, description="ID исполнителя")
    assigned_user_name: Optional[str] = Field(None, description="Явное имя исполнителя (перезаписывает синхронизированное)")

    # Старые клиенты присылают "" вместо отсутствующего исполнителя
    @field_validator("assigned_user", mode="before")
    @classmethod
    def empty_user_to_none(cls, v):
        return None if v == "" else v

class TaskUpdate(BaseModel):
    """
    TaskUpdate — замена задачи (PUT): name и deadline обязательны, остальное — только если передано.
    """
    name: str = Field(..., min_length=1)
    deadline: datetime
    description: Optional[str] = None
    completed: Optional[bool] = None
    assigned_user: Optional[int] = None
    assigned_user_name: Optional[str] = None

    # Старые клиенты присылают "" вместо отсутствующего исполнителя
    @field_validator("assigned_user", mode="before")
    @classmethod
    def empty_user_to_none(cls, v):
        return None if v == "" else v

class TaskRead(TaskBase):
    """
    TaskRead — полная схема задачи для ответа (response).
    """
    id: int
    assigned_user: Optional[int] = None
    assigned_user_name: str
    date_created: Optional[datetime] = None

    class Config:
        from_attributes = True
