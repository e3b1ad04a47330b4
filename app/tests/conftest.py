import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from datetime import datetime, timedelta, timezone
import os
from typing import Generator

# Set the test database URL BEFORE importing settings or the app,
# so the module-level engine in app.database never touches a real file.
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

# Import all model modules first so Base.metadata is populated
import app.models
from app.models.base import Base
from app.models.task import Task as TaskModel
from app.models.user import User as UserModel

from app.main import app
from app.database import get_db
from app.crud.task import create_task
from app.crud.user import create_user
from app.tests.utils import make_engine


@pytest.fixture(scope="function")
def engine():
    """
    Fresh in-memory database per test: commits and rollbacks made by the code
    under test are real, and nothing leaks between tests.
    """
    engine = make_engine()
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(engine) -> Generator[Session, None, None]:
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """
    TestClient with `get_db` overridden to use the test session.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    del app.dependency_overrides[get_db]


@pytest.fixture
def deadline() -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=7)


@pytest.fixture
def task_factory(db: Session, deadline: datetime):
    counter = {"n": 0}

    def _create(**overrides) -> TaskModel:
        counter["n"] += 1
        data = {"name": f"Task {counter['n']}", "deadline": deadline}
        data.update(overrides)
        return create_task(db, data)
    return _create


@pytest.fixture
def user_factory(db: Session):
    counter = {"n": 0}

    def _create(**overrides) -> UserModel:
        counter["n"] += 1
        data = {"name": f"User {counter['n']}", "email": f"user{counter['n']}@example.com"}
        data.update(overrides)
        return create_user(db, data)
    return _create
