import pytest
from sqlalchemy.orm import Session

from app.crud import associations
from app.crud.transaction import run_atomic
from app.core.exceptions import UserNotFound
from app.models.task import Task as TaskModel
from app.tests.utils import reload_user


def test_detach_task_not_in_pending_list_is_noop(db: Session, user_factory, task_factory):
    user = user_factory()
    task = task_factory()
    version_before = user.version_id

    run_atomic(db, lambda uow: associations.detach_from_user(uow, user.id, task.id))

    reloaded = reload_user(db, user.id)
    assert reloaded.pending_tasks == []
    assert reloaded.version_id == version_before # nothing was written

def test_detach_without_user_reference_returns_none(db: Session, task_factory):
    task = task_factory()
    assert run_atomic(db, lambda uow: associations.detach_from_user(uow, None, task.id)) is None

def test_detach_from_missing_user_raises(db: Session, task_factory):
    task = task_factory()
    with pytest.raises(UserNotFound, match="User with ID 999 not found"):
        run_atomic(db, lambda uow: associations.detach_from_user(uow, 999, task.id))

def test_detach_removes_every_occurrence(db: Session, user_factory, task_factory):
    task = task_factory()
    other = task_factory()
    user = user_factory(pending_tasks=[task.id, other.id, task.id])

    run_atomic(db, lambda uow: associations.detach_from_user(uow, user.id, task.id))

    assert reload_user(db, user.id).pending_tasks == [other.id]

def test_attach_appends_to_pending_list(db: Session, user_factory, task_factory):
    first = task_factory()
    second = task_factory()
    user = user_factory(pending_tasks=[first.id])

    run_atomic(db, lambda uow: associations.attach_to_user(uow, user.id, second.id))

    assert reload_user(db, user.id).pending_tasks == [first.id, second.id]

def test_attach_to_missing_user_raises(db: Session, task_factory):
    task = task_factory()
    with pytest.raises(UserNotFound):
        run_atomic(db, lambda uow: associations.attach_to_user(uow, 12345, task.id))

def test_sync_assigned_name(user_factory):
    user = user_factory(name="Alice")
    task = TaskModel(name="t")

    associations.sync_assigned_name(task, user)
    assert task.assigned_user_name == "Alice"

    associations.sync_assigned_name(task, None)
    assert task.assigned_user_name == "unassigned"

def test_release_task_clears_reference_and_name(user_factory):
    user = user_factory(name="Bob")
    task = TaskModel(name="t")
    associations.assign_task(task, user)
    assert task.assigned_user == user.id
    assert task.assigned_user_name == "Bob"

    associations.release_task(task)
    assert task.assigned_user is None
    assert task.assigned_user_name == "unassigned"
