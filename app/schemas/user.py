#app/schemas/user.py
from pydantic import BaseModel, Field, EmailStr
from typing import Optional, List
from datetime import datetime

class UserBase(BaseModel):
    """
    UserBase — базовая схема пользователя (используется для create/read).
    """
    name: str = Field(..., min_length=1, examples=["John Doe"], description="Имя пользователя")
    email: EmailStr = Field(..., examples=["john.doe@example.com"], description="Email пользователя")

class UserCreate(UserBase):
    """
    UserCreate — создание пользователя, можно сразу передать pending_tasks.
    """
    pending_tasks: List[int] = Field(default_factory=list, description="ID задач, назначаемых пользователю")

class UserUpdate(BaseModel):
    """
    UserUpdate — замена пользователя (PUT): name и email обязательны,
    pending_tasks — полная замена списка, если передан.
    """
    name: str = Field(..., min_length=1)
    email: EmailStr
    pending_tasks: Optional[List[int]] = None

class UserRead(UserBase):
    """
    UserRead — схема для выдачи пользователя (response).
    """
    id: int
    pending_tasks: List[int] = Field(default_factory=list)
    date_created: Optional[datetime] = None

    class Config:
        from_attributes = True
