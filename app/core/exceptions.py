# app/core/exceptions.py

from typing import Any, Optional


class BaseAppException(Exception):
    """Базовый класс для всех кастомных исключений приложения."""
    status_code: int = 500

    def __init__(self, message: str = "App exception"):
        super().__init__(message)
        self.message = message

# ==== Валидация/создание ====

class ValidationError(BaseAppException):
    """Общая ошибка валидации."""
    status_code = 400

    def __init__(self, message: str = "Validation error", detail: Any = None):
        super().__init__(message)
        self.detail = detail

class TaskValidationError(ValidationError):
    """Ошибка валидации задачи."""
    def __init__(self, message: str = "Task validation error", detail: Any = None):
        super().__init__(message, detail)

class UserValidationError(ValidationError):
    """Ошибка валидации пользователя."""
    def __init__(self, message: str = "User validation error", detail: Any = None):
        super().__init__(message, detail)

class QueryParamsError(ValidationError):
    """Query-параметры не удалось разобрать как JSON."""
    def __init__(self, detail: Any = None):
        super().__init__("Query parameters parse failed", detail)

# ==== NotFound ====

class NotFoundError(BaseAppException):
    """Ошибка отсутствия ресурса."""
    status_code = 404
    entity: str = "Resource"

    def __init__(self, entity_id: Any = None, message: Optional[str] = None):
        self.entity_id = entity_id
        if message is None:
            message = (
                f"{self.entity} not found"
                if entity_id is None
                else f"{self.entity} with ID {entity_id} not found"
            )
        super().__init__(message)

class TaskNotFound(NotFoundError):
    """Ошибка: задача не найдена."""
    entity = "Task"

class UserNotFound(NotFoundError):
    """Ошибка: пользователь не найден."""
    entity = "User"

# ==== Состояние задачи ====

class AlreadyCompleted(BaseAppException):
    """Задача уже завершена, изменять её нельзя."""
    status_code = 400

    def __init__(self, task_id: Any = None, message: str = "Task is already completed"):
        super().__init__(message)
        self.task_id = task_id

class TaskAlreadyCompleted(AlreadyCompleted):
    """Завершённую задачу нельзя назначить пользователю."""
    def __init__(self, task_id: Any = None):
        super().__init__(task_id, "Task to assign is already completed")

# ==== Дубликаты ====

class DuplicateEmail(BaseAppException):
    """Ошибка: пользователь с таким email уже существует."""
    status_code = 400

    def __init__(self, email: str = ""):
        super().__init__("Email already exists")
        self.email = email

# ==== Транзакции ====

class TransactionAborted(BaseAppException):
    """
    Транзакция прервана из-за ошибки хранилища (соединение, конфликт версий, таймаут).
    Исходная причина доступна в `cause`.
    """
    status_code = 500

    def __init__(self, cause: Optional[BaseException] = None, message: str = "Transaction failed"):
        super().__init__(message)
        self.cause = cause
