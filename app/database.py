# app/database.py

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, scoped_session
from app.core.settings import settings

# sqlite-соединение используется из threadpool FastAPI, поэтому отключаем проверку потока
connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

# Создаем движок подключения к БД
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=connect_args,
    echo=settings.DATABASE_ECHO,
)

# Фабрика сессий (scoped_session для потокобезопасности)
SessionLocal = scoped_session(
    sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        expire_on_commit=False,
    )
)

def get_db():
    """
    Dependency для FastAPI: отдаёт сессию и гарантирует закрытие после запроса.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db() -> None:
    """Создаёт таблицы, если их ещё нет."""
    import app.models  # noqa: F401  (регистрирует модели в Base.metadata)
    from app.models.base import Base
    Base.metadata.create_all(bind=engine)
