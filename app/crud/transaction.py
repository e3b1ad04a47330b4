#app/crud/transaction.py
"""
Атомарное выполнение единицы работы (unit of work) над хранилищем.

Каждая операция Update/Delete оборачивается ровно в один вызов run_atomic:
либо все записи фиксируются вместе, либо откатываются все.
"""
import logging
import time
from typing import Callable, List, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    BaseAppException,
    TaskNotFound,
    TransactionAborted,
    UserNotFound,
)
from app.core.settings import settings
from app.models.task import Task
from app.models.user import User

logger = logging.getLogger("Taskboard.Transaction")

T = TypeVar("T")

_ACTIVE_FLAG = "taskboard_uow_active"


class UnitOfWork:
    """
    Контекст одной атомарной операции: доступ к записям внутри открытой транзакции.
    Сама ничего не коммитит, commit/rollback делает run_atomic.
    """

    def __init__(self, db: Session, name: str, timeout: Optional[float] = None):
        self.db = db
        self.name = name
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def check_deadline(self) -> None:
        if self._deadline is not None and time.monotonic() > self._deadline:
            raise TransactionAborted(
                TimeoutError(f"Unit of work '{self.name}' exceeded its time limit"),
                message="Transaction timed out",
            )

    def get_task(self, task_id: int) -> Task:
        self.check_deadline()
        task = self.db.query(Task).filter(Task.id == task_id).first()
        if not task:
            raise TaskNotFound(task_id)
        return task

    def get_user(self, user_id: int) -> User:
        self.check_deadline()
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise UserNotFound(user_id)
        return user

    def find_user_by_email(self, email: str) -> Optional[User]:
        self.check_deadline()
        return self.db.query(User).filter(User.email == email).first()

    def find_tasks_assigned_to(self, user_id: int) -> List[Task]:
        self.check_deadline()
        return self.db.query(Task).filter(Task.assigned_user == user_id).order_by(Task.id).all()

    def put(self, record) -> None:
        self.check_deadline()
        self.db.add(record)
        self.db.flush()

    def delete(self, record) -> None:
        self.check_deadline()
        self.db.delete(record)
        self.db.flush()


def run_atomic(
    db: Session,
    work: Callable[[UnitOfWork], T],
    *,
    name: str = "unit of work",
    timeout: Optional[float] = None,
) -> T:
    """
    Выполняет work(uow) в одной транзакции.

    - успех: commit, возвращается результат work;
    - доменная ошибка (BaseAppException): rollback, ошибка пробрасывается без изменений;
    - ошибка SQLAlchemy (соединение, IntegrityError, конфликт версий): rollback,
      пробрасывается TransactionAborted с исходной причиной;
    - любая другая ошибка: rollback и проброс как есть.
    """
    if db.info.get(_ACTIVE_FLAG):
        raise RuntimeError(f"Nested unit of work '{name}' is not allowed")

    if timeout is None:
        timeout = settings.TRANSACTION_TIMEOUT_SECONDS

    # Записи из прошлых транзакций не переиспользуются
    db.expire_all()
    db.info[_ACTIVE_FLAG] = True
    uow = UnitOfWork(db, name, timeout)
    try:
        result = work(uow)
        uow.check_deadline()
        db.commit()
        return result
    except BaseAppException as e:
        db.rollback()
        logger.warning(f"Rolled back '{name}': {e}")
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Store failure in '{name}', rolled back: {e}", exc_info=True)
        raise TransactionAborted(e) from e
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error in '{name}', rolled back: {e}", exc_info=True)
        raise
    finally:
        db.info.pop(_ACTIVE_FLAG, None)
