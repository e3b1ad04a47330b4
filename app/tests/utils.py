"""Helpers shared by crud and api tests."""
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from app.models.task import Task as TaskModel
from app.models.user import User as UserModel


def make_engine(url: str = "sqlite://"):
    """In-memory engine shared across threads, or a file-backed one for multi-connection tests."""
    if url == "sqlite://":
        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    return create_engine(url, connect_args={"check_same_thread": False})


def reload_task(db: Session, task_id: int) -> TaskModel:
    db.expire_all()
    return db.query(TaskModel).filter(TaskModel.id == task_id).first()


def reload_user(db: Session, user_id: int) -> UserModel:
    db.expire_all()
    return db.query(UserModel).filter(UserModel.id == user_id).first()


def assert_invariants(db: Session) -> None:
    """
    Checks the mutual-reference invariants between tasks and users on committed state.
    """
    db.expire_all()
    tasks = {t.id: t for t in db.query(TaskModel).all()}
    users = {u.id: u for u in db.query(UserModel).all()}

    for task in tasks.values():
        if task.assigned_user is None:
            assert task.assigned_user_name == "unassigned", task
            continue
        assert task.assigned_user in users, f"dangling reference: {task}"
        owner = users[task.assigned_user]
        assert task.assigned_user_name == owner.name, task
        if task.completed:
            for user in users.values():
                assert task.id not in user.pending_tasks, (task, user)
        else:
            assert task.id in owner.pending_tasks, (task, owner)

    for user in users.values():
        for task_id in user.pending_tasks:
            assert task_id in tasks, f"user {user.id} references missing task {task_id}"
            task = tasks[task_id]
            assert not task.completed, (task, user)
            assert task.assigned_user == user.id, (task, user)
