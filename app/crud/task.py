#app/crud/task.py
from datetime import datetime
from sqlalchemy.orm import Session
from app.models.task import Task, UNASSIGNED_NAME
from app.core.exceptions import (
    AlreadyCompleted,
    TaskNotFound,
    TaskValidationError,
)
from app.crud import associations
from app.crud.query import build_list_query
from app.crud.transaction import UnitOfWork, run_atomic
import logging
from typing import Any, Dict, List, Union

logger = logging.getLogger("Taskboard.Tasks")

def _parse_deadline(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        raise TaskValidationError("Invalid deadline format. Use ISO 8601.")

def _required_name(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise TaskValidationError("Task name is required.")
    return value.strip()

def create_task(db: Session, data: dict) -> Task:
    """
    Создать задачу. Если указан assigned_user, задача сразу попадает
    в pending_tasks пользователя (если не завершена).
    """
    name = _required_name(data.get("name"))
    if data.get("deadline") in (None, ""):
        raise TaskValidationError("Task deadline is required.")
    deadline = _parse_deadline(data["deadline"])

    def work(uow: UnitOfWork) -> Task:
        task = Task(
            name=name,
            deadline=deadline,
            description=data.get("description") or "",
            completed=bool(data.get("completed", False)),
            assigned_user=None,
            assigned_user_name=UNASSIGNED_NAME,
        )
        uow.put(task)

        user_id = data.get("assigned_user")
        if user_id is not None:
            user = uow.get_user(user_id)
            associations.assign_task(task, user)
            if not task.completed:
                associations.attach_to_user(uow, user.id, task.id)
        if data.get("assigned_user_name") is not None:
            associations.override_assigned_name(task, data["assigned_user_name"])
        uow.put(task)
        return task

    task = run_atomic(db, work, name="create_task")
    logger.info(f"Created task {task.id} (assigned_user={task.assigned_user})")
    return task

def get_task(db: Session, task_id: int) -> Task:
    """
    Получить задачу по ID.
    """
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise TaskNotFound(task_id)
    return task

def list_tasks(db: Session, params: Dict[str, Any] = None) -> Union[List[Task], int]:
    """
    Список задач по where/sort/skip/limit; при count=true только количество.
    """
    params = params or {}
    query = build_list_query(db, Task, params)
    if params.get("count"):
        return query.count()
    return query.all()

def update_task(db: Session, task_id: int, data: dict) -> Task:
    """
    Обновить задачу и согласовать ссылки на пользователей в одной транзакции.

    Порядок: простые поля -> completed -> assigned_user -> явный assigned_user_name.
    Завершённую задачу изменить нельзя (AlreadyCompleted), любая ошибка откатывает всё.
    """
    def work(uow: UnitOfWork) -> Task:
        task = uow.get_task(task_id)
        if task.completed:
            raise AlreadyCompleted(task_id)

        if "name" in data:
            task.name = data["name"]
        if "deadline" in data:
            task.deadline = _parse_deadline(data["deadline"])
        if "description" in data:
            task.description = data["description"] or ""

        if "completed" in data:
            task.completed = bool(data["completed"])
            if task.assigned_user is not None:
                associations.detach_from_user(uow, task.assigned_user, task.id)
                if not task.completed:
                    associations.attach_to_user(uow, task.assigned_user, task.id)

        if "assigned_user" in data:
            associations.detach_from_user(uow, task.assigned_user, task.id)
            new_user_id = data["assigned_user"]
            if new_user_id is None:
                associations.release_task(task)
            else:
                user = uow.get_user(new_user_id)
                associations.assign_task(task, user)
                if not task.completed:
                    associations.attach_to_user(uow, user.id, task.id)

        if "assigned_user_name" in data:
            if data["assigned_user_name"] is None:
                # null возвращает имя текущего исполнителя
                user = uow.get_user(task.assigned_user) if task.assigned_user is not None else None
                associations.sync_assigned_name(task, user)
            else:
                associations.override_assigned_name(task, data["assigned_user_name"])

        uow.put(task)
        return task

    task = run_atomic(db, work, name="update_task")
    logger.info(f"Updated task {task.id} fields: {sorted(data.keys())}")
    return task

def delete_task(db: Session, task_id: int) -> None:
    """
    Удалить задачу; незавершённая назначенная задача сначала убирается из pending_tasks
    исполнителя (исполнитель обязан существовать, иначе UserNotFound и удаление отменяется).
    """
    def work(uow: UnitOfWork) -> None:
        task = uow.get_task(task_id)
        if not task.completed and task.assigned_user is not None:
            associations.detach_from_user(uow, task.assigned_user, task.id)
        uow.delete(task)

    run_atomic(db, work, name="delete_task")
    logger.info(f"Deleted task {task_id}")
