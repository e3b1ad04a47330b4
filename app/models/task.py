#app/models/task.py
from datetime import datetime
from typing import Optional
from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Boolean, Index, func
)
from app.models.base import Base

# Имя, которое показывается у задачи без исполнителя
UNASSIGNED_NAME = "unassigned"

class Task(Base):
    """
    Task — задача с дедлайном, которую можно назначить не более чем одному пользователю.

    Поля assigned_user / assigned_user_name меняются только через app.crud.associations.
    """
    __tablename__ = "tasks"

    id: int = Column(Integer, primary_key=True, autoincrement=True)
    name: str = Column(String(160), nullable=False, doc="Название задачи")
    description: str = Column(String(2000), nullable=False, default="", doc="Описание")
    deadline: datetime = Column(DateTime(timezone=True), nullable=False, doc="Дедлайн")
    completed: bool = Column(Boolean, nullable=False, default=False, doc="Завершена ли задача")
    assigned_user: Optional[int] = Column(
        Integer, ForeignKey("users.id"), nullable=True, doc="ID исполнителя (None — не назначена)"
    )
    assigned_user_name: str = Column(
        String(128), nullable=False, default=UNASSIGNED_NAME, doc="Денормализованное имя исполнителя"
    )
    date_created: datetime = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, doc="Дата создания")
    version_id: int = Column(Integer, nullable=False, doc="Счётчик версий для оптимистичной блокировки")

    __table_args__ = (
        Index("ix_tasks_assigned_user", "assigned_user"),
        Index("ix_tasks_deadline", "deadline"),
    )
    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self):
        return (
            f"<Task(id={self.id}, name='{self.name}', completed={self.completed}, "
            f"assigned_user={self.assigned_user}, assigned_user_name='{self.assigned_user_name}')>"
        )
