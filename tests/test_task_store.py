# tests/test_task_store.py

from __future__ import annotations

import sqlite3
from datetime import datetime

import pytest

from task_assistant.core.errors import StorageError, TaskNotFoundError, TaskValidationError
from task_assistant.tasks.task_format import format_task_item
from task_assistant.tasks.task_models import Task, TaskStatus
from task_assistant.tasks.task_store import TaskStore


def _add(store: TaskStore, user_id: int = 1, desc: str = "task", **kw) -> Task:
    return store.add(Task(user_id=user_id, original_description=desc, **kw))


def test_add_assigns_id_and_defaults(task_store: TaskStore) -> None:
    task = _add(task_store, desc="Купить продукты", deadline=datetime(2025, 7, 20, 23, 59, 59))

    assert task.id is not None and task.id > 0
    assert task.status == TaskStatus.ACTIVE
    assert task.created_at is not None
    assert task.updated_at == task.created_at

    loaded = task_store.get(task.id)
    assert loaded.original_description == "Купить продукты"
    assert loaded.processed_description is None
    assert loaded.deadline == datetime(2025, 7, 20, 23, 59, 59)
    assert loaded.status == TaskStatus.ACTIVE
    assert loaded.created_at == task.created_at


def test_add_validates_before_insert(task_store: TaskStore) -> None:
    with pytest.raises(TaskValidationError):
        _add(task_store, desc="   ")
    assert task_store.count_tasks() == 0


def test_add_rejects_already_stored_task(task_store: TaskStore) -> None:
    task = _add(task_store)
    with pytest.raises(ValueError):
        task_store.add(task)


def test_get_missing_task(task_store: TaskStore) -> None:
    with pytest.raises(TaskNotFoundError) as exc:
        task_store.get(999)
    assert exc.value.task_id == 999
    assert str(exc.value) == "task with id 999 not found"


def test_update_persists_mutable_fields(task_store: TaskStore) -> None:
    task = _add(task_store, desc="old")
    created_at = task.created_at

    task.original_description = "new"
    task.processed_description = "New, improved"
    task.deadline = datetime(2030, 1, 1, 23, 59, 59)
    task.status = TaskStatus.POSTPONED
    task_store.update(task)

    loaded = task_store.get(task.id)
    assert loaded.original_description == "new"
    assert loaded.processed_description == "New, improved"
    assert loaded.deadline == datetime(2030, 1, 1, 23, 59, 59)
    assert loaded.status == TaskStatus.POSTPONED
    assert loaded.created_at == created_at


def test_update_never_rewrites_owner(task_store: TaskStore) -> None:
    task = _add(task_store, user_id=1)
    task.user_id = 2
    task_store.update(task)

    assert task_store.get(task.id).user_id == 1


def test_update_with_unset_status_keeps_stored_one(task_store: TaskStore) -> None:
    task = _add(task_store, status=TaskStatus.DONE)
    task.status = None
    task.original_description = "renamed"
    updated = task_store.update(task)

    assert updated.status == TaskStatus.DONE
    assert task_store.get(task.id).status == TaskStatus.DONE


def test_update_missing_task(task_store: TaskStore) -> None:
    with pytest.raises(TaskNotFoundError):
        task_store.update(Task(user_id=1, original_description="x", id=404))

    with pytest.raises(TaskNotFoundError):
        task_store.update(Task(user_id=1, original_description="x"))


def test_delete(task_store: TaskStore) -> None:
    task = _add(task_store)
    task_store.delete(task.id)

    with pytest.raises(TaskNotFoundError):
        task_store.get(task.id)
    with pytest.raises(TaskNotFoundError):
        task_store.delete(task.id)


def test_list_by_user_newest_first_and_scoped(task_store: TaskStore) -> None:
    first = _add(task_store, desc="first", created_at=datetime(2025, 1, 1))
    second = _add(task_store, desc="second", created_at=datetime(2025, 1, 2))
    _add(task_store, user_id=2, desc="foreign")

    assert [t.id for t in task_store.list_by_user(1)] == [second.id, first.id]
    assert task_store.list_by_user(3) == []


def test_list_active_interleaves_deadlines_and_creation_times(task_store: TaskStore) -> None:
    d1 = _add(
        task_store,
        desc="deadline jan 10",
        deadline=datetime(2025, 1, 10, 23, 59, 59),
        created_at=datetime(2025, 1, 1),
    )
    no_deadline = _add(task_store, desc="created jan 15", created_at=datetime(2025, 1, 15))
    d2 = _add(
        task_store,
        desc="deadline jan 20",
        deadline=datetime(2025, 1, 20, 23, 59, 59),
        created_at=datetime(2025, 1, 2),
    )
    _add(task_store, desc="done", status=TaskStatus.DONE, created_at=datetime(2024, 12, 1))

    assert [t.id for t in task_store.list_active(1)] == [d1.id, no_deadline.id, d2.id]


def test_list_by_status(task_store: TaskStore) -> None:
    done_old = _add(task_store, status=TaskStatus.DONE, created_at=datetime(2025, 1, 1))
    done_new = _add(task_store, status=TaskStatus.DONE, created_at=datetime(2025, 2, 1))
    _add(task_store, status=TaskStatus.POSTPONED)

    assert [t.id for t in task_store.list_by_status(1, TaskStatus.DONE)] == [done_new.id, done_old.id]
    assert len(task_store.list_by_status(1, "postponed")) == 1


def test_list_overdue(task_store: TaskStore) -> None:
    now = datetime(2025, 7, 21, 9, 0, 0)
    late = _add(task_store, desc="late", deadline=datetime(2025, 7, 20, 23, 59, 59))
    later = _add(task_store, desc="later", deadline=datetime(2025, 7, 10, 23, 59, 59))
    _add(task_store, desc="future", deadline=datetime(2025, 7, 22, 23, 59, 59))
    _add(task_store, desc="no deadline")
    _add(task_store, desc="done", deadline=datetime(2025, 7, 1, 23, 59, 59), status=TaskStatus.DONE)
    _add(
        task_store,
        desc="postponed",
        deadline=datetime(2025, 7, 1, 23, 59, 59),
        status=TaskStatus.POSTPONED,
    )
    _add(task_store, user_id=2, desc="foreign", deadline=datetime(2025, 7, 1, 23, 59, 59))

    assert [t.id for t in task_store.list_overdue(1, now)] == [later.id, late.id]


def test_list_overdue_excludes_deadline_equal_to_now(task_store: TaskStore) -> None:
    deadline = datetime(2025, 7, 20, 23, 59, 59)
    _add(task_store, deadline=deadline)
    assert task_store.list_overdue(1, deadline) == []


def test_count_by_status_fills_missing_statuses(task_store: TaskStore) -> None:
    _add(task_store)
    _add(task_store)
    _add(task_store, status=TaskStatus.DONE)
    _add(task_store, user_id=2)

    assert task_store.count_by_status(1) == {
        TaskStatus.ACTIVE: 2,
        TaskStatus.DONE: 1,
        TaskStatus.POSTPONED: 0,
    }


def test_schema_rejects_unknown_status(task_store: TaskStore, settings) -> None:
    conn = sqlite3.connect(str(settings.tasks_db_path))
    try:
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute(
                "INSERT INTO tasks(user_id, original_description, status, created_at, updated_at) "
                "VALUES (1, 'x', 'archived', 0, 0)"
            )
    finally:
        conn.close()


def test_store_reopens_existing_database(settings) -> None:
    first = TaskStore(settings.tasks_db_path)
    task = first.add(Task(user_id=1, original_description="persisted"))

    second = TaskStore(settings.tasks_db_path)
    assert second.get(task.id).original_description == "persisted"


def test_update_result_renders_with_stored_status(task_store: TaskStore) -> None:
    task = _add(
        task_store,
        desc="paid",
        deadline=datetime(2020, 1, 1, 23, 59, 59),
        status=TaskStatus.DONE,
    )
    task.status = None
    updated = task_store.update(task)

    assert format_task_item(updated, 1, datetime(2025, 1, 1)) == (
        f"✅ 1. paid (ID: {task.id})\n   ⏰ Срок: 01.01.2020"
    )


def test_out_of_range_ids_are_storage_errors(task_store: TaskStore) -> None:
    with pytest.raises(StorageError):
        task_store.get(10**20)
    with pytest.raises(StorageError):
        task_store.delete(10**20)
