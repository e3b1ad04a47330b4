#app/crud/associations.py
"""
Поддержка взаимных ссылок Task.assigned_user <-> User.pending_tasks.

Только этот модуль записывает assigned_user, assigned_user_name и pending_tasks.
Функции работают внутри уже открытой единицы работы и никогда не коммитят сами.
"""
import logging
from typing import Iterable, List, Optional

from app.crud.transaction import UnitOfWork
from app.models.task import Task, UNASSIGNED_NAME
from app.models.user import User

logger = logging.getLogger("Taskboard.Associations")


def detach_from_user(uow: UnitOfWork, user_id: Optional[int], task_id: int) -> Optional[User]:
    """
    Убирает task_id из pending_tasks пользователя (все вхождения).
    Пустая ссылка или отсутствие задачи в списке не считаются ошибкой.
    """
    if user_id is None:
        return None
    user = uow.get_user(user_id)
    remaining = [pending_id for pending_id in user.pending_tasks if pending_id != task_id]
    if len(remaining) != len(user.pending_tasks):
        user.pending_tasks = remaining
        uow.put(user)
        logger.debug(f"Detached task {task_id} from user {user_id}")
    return user


def attach_to_user(uow: UnitOfWork, user_id: int, task_id: int) -> User:
    """Добавляет task_id в конец pending_tasks. Для завершённых задач не вызывать."""
    user = uow.get_user(user_id)
    user.pending_tasks = list(user.pending_tasks) + [task_id]
    uow.put(user)
    logger.debug(f"Attached task {task_id} to user {user_id}")
    return user


def sync_assigned_name(task: Task, user: Optional[User]) -> None:
    task.assigned_user_name = user.name if user is not None else UNASSIGNED_NAME


def override_assigned_name(task: Task, name: str) -> None:
    """Явная перезапись денормализованного имени вызывающей стороной."""
    task.assigned_user_name = name


def assign_task(task: Task, user: User) -> None:
    task.assigned_user = user.id
    sync_assigned_name(task, user)


def release_task(task: Task) -> None:
    task.assigned_user = None
    sync_assigned_name(task, None)


def replace_pending_tasks(user: User, task_ids: Iterable[int]) -> None:
    # Порядок и дубликаты сохраняются как есть
    user.pending_tasks = list(task_ids)


def sync_names_for_user(uow: UnitOfWork, user: User) -> List[Task]:
    """Пересинхронизирует assigned_user_name у всех задач, ссылающихся на пользователя."""
    changed = []
    for task in uow.find_tasks_assigned_to(user.id):
        if task.assigned_user_name != user.name:
            sync_assigned_name(task, user)
            uow.put(task)
            changed.append(task)
    if changed:
        logger.info(f"Synced assigned name '{user.name}' on {len(changed)} task(s) of user {user.id}")
    return changed
