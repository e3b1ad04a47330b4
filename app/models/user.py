#app/models/user.py
from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, DateTime, JSON, func
)
from app.models.base import Base

class User(Base):
    """
    User — исполнитель задач. pending_tasks — упорядоченный список ID незавершённых задач
    (дубликаты сохраняются как есть), меняется только через app.crud.associations.
    """
    __tablename__ = "users"

    id: int = Column(Integer, primary_key=True, index=True)
    name: str = Column(String(128), nullable=False, doc="Имя пользователя")
    email: str = Column(String(255), unique=True, nullable=False, index=True, doc="Email (уникальный)")
    pending_tasks: list = Column(JSON, nullable=False, default=lambda: [], doc="ID назначенных незавершённых задач")
    date_created: datetime = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, doc="Дата создания")
    version_id: int = Column(Integer, nullable=False, doc="Счётчик версий для оптимистичной блокировки")

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self):
        return (
            f"<User(id={self.id}, name='{self.name}', email='{self.email}', pending_tasks={self.pending_tasks})>"
        )
