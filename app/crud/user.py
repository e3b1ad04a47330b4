#app/crud/user.py
from sqlalchemy.orm import Session
from app.models.user import User
from app.core.exceptions import (
    DuplicateEmail,
    TaskAlreadyCompleted,
    UserNotFound,
    UserValidationError,
)
from app.crud import associations
from app.crud.query import build_list_query
from app.crud.transaction import UnitOfWork, run_atomic
import logging
from typing import Any, Dict, Iterable, List, Optional, Union

logger = logging.getLogger("Taskboard.Users")

def _required_text(data: dict, field: str) -> str:
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise UserValidationError(f"User {field} is required.")
    return value.strip()

def _ensure_email_free(uow: UnitOfWork, email: str, user_id: Optional[int] = None) -> None:
    existing = uow.find_user_by_email(email)
    if existing is not None and existing.id != user_id:
        raise DuplicateEmail(email)

def _assign_pending_tasks(uow: UnitOfWork, user: User, task_ids: Iterable[int]) -> None:
    """
    Записывает новый pending_tasks (как есть) и назначает каждую задачу пользователю.
    Задача, висящая у другого пользователя, сначала снимается с него.
    """
    task_ids = list(task_ids)
    associations.replace_pending_tasks(user, task_ids)
    for task_id in task_ids:
        task = uow.get_task(task_id)
        if task.completed:
            raise TaskAlreadyCompleted(task_id)
        if task.assigned_user is not None and task.assigned_user != user.id:
            associations.detach_from_user(uow, task.assigned_user, task.id)
        associations.assign_task(task, user)
        uow.put(task)

def _release_pending_tasks(uow: UnitOfWork, user: User) -> None:
    for task_id in list(user.pending_tasks):
        task = uow.get_task(task_id)
        if task.completed:
            raise TaskAlreadyCompleted(task_id)
        associations.release_task(task)
        uow.put(task)

def create_user(db: Session, data: dict) -> User:
    """
    Создать пользователя с уникальным email. Начальный pending_tasks сразу
    назначает перечисленные задачи этому пользователю.
    """
    name = _required_text(data, "name")
    email = _required_text(data, "email")

    def work(uow: UnitOfWork) -> User:
        _ensure_email_free(uow, email)
        user = User(name=name, email=email, pending_tasks=[])
        uow.put(user)
        if data.get("pending_tasks"):
            _assign_pending_tasks(uow, user, data["pending_tasks"])
            uow.put(user)
        return user

    user = run_atomic(db, work, name="create_user")
    logger.info(f"Created user {user.id} <{user.email}> with {len(user.pending_tasks)} pending task(s)")
    return user

def get_user(db: Session, user_id: int) -> User:
    """
    Получить пользователя по ID.
    """
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise UserNotFound(user_id)
    return user

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()

def list_users(db: Session, params: Dict[str, Any] = None) -> Union[List[User], int]:
    """
    Список пользователей по where/sort/skip/limit; при count=true только количество.
    """
    params = params or {}
    query = build_list_query(db, User, params)
    if params.get("count"):
        return query.count()
    return query.all()

def update_user(db: Session, user_id: int, data: dict) -> User:
    """
    Обновить пользователя. pending_tasks заменяется целиком: старые назначения
    снимаются безусловно, затем строятся новые (даже для совпадающих ID).
    """
    def work(uow: UnitOfWork) -> User:
        user = uow.get_user(user_id)
        renamed = "name" in data and data["name"] != user.name

        if "email" in data and data["email"] != user.email:
            _ensure_email_free(uow, data["email"], user.id)
            user.email = data["email"]
        if "name" in data:
            user.name = data["name"]

        if "pending_tasks" in data:
            _release_pending_tasks(uow, user)
            _assign_pending_tasks(uow, user, data["pending_tasks"] or [])

        uow.put(user)
        if renamed:
            associations.sync_names_for_user(uow, user)
        return user

    user = run_atomic(db, work, name="update_user")
    logger.info(f"Updated user {user.id} fields: {sorted(data.keys())}")
    return user

def delete_user(db: Session, user_id: int) -> None:
    """
    Удалить пользователя: его незавершённые задачи становятся неназначенными.
    """
    def work(uow: UnitOfWork) -> int:
        user = uow.get_user(user_id)
        released = 0
        for task_id in list(user.pending_tasks):
            task = uow.get_task(task_id)
            if not task.completed:
                associations.release_task(task)
                uow.put(task)
                released += 1
        # Завершённые задачи тоже не должны ссылаться на удалённого пользователя
        for task in uow.find_tasks_assigned_to(user.id):
            associations.release_task(task)
            uow.put(task)
        uow.delete(user)
        return released

    released = run_atomic(db, work, name="delete_user")
    logger.info(f"Deleted user {user_id}, released {released} pending task(s)")
