# src/task_assistant/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path
from typing import Any

from ..core.errors import StorageError, TaskNotFoundError
from .task_models import Task, TaskStatus, now_local

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, user_id, original_description, processed_description, "
    "deadline, status, created_at, updated_at"
)


def _to_ts(value: datetime | None) -> float | None:
    return value.timestamp() if value is not None else None


def _from_ts(value: Any) -> datetime | None:
    return datetime.fromtimestamp(float(value)) if value is not None else None


class TaskStore:
    """
    SQLite task store (the task query engine).

    Schema is created and migrated on startup:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Timestamps are stored as REAL epoch seconds; a NULL deadline means
    "no deadline".

    Thread-safety:
    - each method opens its own SQLite connection; row-level serialization
      is left to SQLite
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except StorageError:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    @contextlib.contextmanager
    def _session(self, action: str) -> Iterator[sqlite3.Connection]:
        """Open a connection, commit on success, turn driver errors into StorageError."""
        conn: sqlite3.Connection | None = None
        try:
            conn = self._get_conn()
            yield conn
            conn.commit()
        except (sqlite3.Error, OverflowError) as e:
            # OverflowError: an integer outside SQLite INTEGER range.
            raise StorageError(f"failed to {action}: {e}") from e
        finally:
            if conn is not None:
                conn.close()

    def _ensure_schema(self) -> None:
        with self._session("create tasks schema") as conn:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    original_description TEXT NOT NULL,
                    processed_description TEXT,
                    deadline REAL,
                    status TEXT NOT NULL DEFAULT 'active'
                        CHECK(status IN ('active', 'done', 'postponed')),
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("processed_description", "TEXT")
            add_col("deadline", "REAL")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_user_id ON tasks(user_id)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_deadline ON tasks(deadline)")

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            user_id=int(row["user_id"]),
            original_description=str(row["original_description"] or ""),
            processed_description=row["processed_description"],
            deadline=_from_ts(row["deadline"]),
            status=TaskStatus(row["status"]),
            created_at=_from_ts(row["created_at"]),
            updated_at=_from_ts(row["updated_at"]),
        )

    def _query_tasks(self, action: str, sql: str, params: tuple[Any, ...]) -> list[Task]:
        with self._session(action) as conn:
            rows = conn.execute(sql, params).fetchall()
        return [self._row_to_task(r) for r in rows]

    # ---- public API ----

    def count_tasks(self) -> int:
        with self._session("count tasks") as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
        return int(n)

    def count_by_status(self, user_id: int) -> dict[TaskStatus, int]:
        counts = {status: 0 for status in TaskStatus}
        with self._session("count tasks by status") as conn:
            rows = conn.execute(
                "SELECT status, COUNT(*) AS n FROM tasks WHERE user_id = ? GROUP BY status",
                (int(user_id),),
            ).fetchall()
        for row in rows:
            counts[TaskStatus(row["status"])] = int(row["n"])
        return counts

    def add(self, task: Task) -> Task:
        """Validate, apply defaults, insert. Sets task.id and returns the same task."""
        if task.id is not None:
            raise ValueError(f"task already stored with id={task.id}")
        task.validate()
        task.set_defaults()
        task.status = TaskStatus.parse(task.status)

        with self._session("insert task") as conn:
            cur = conn.execute(
                """
                INSERT INTO tasks(
                    user_id, original_description, processed_description,
                    deadline, status, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    int(task.user_id),
                    task.original_description,
                    task.processed_description,
                    _to_ts(task.deadline),
                    task.status.value,
                    _to_ts(task.created_at),
                    _to_ts(task.updated_at),
                ),
            )
            rowid = cur.lastrowid

        if rowid is None:
            raise StorageError("SQLite did not return lastrowid for tasks insert")

        task.id = int(rowid)
        logger.debug(
            "Task added id=%s user_id=%s status=%s deadline=%s",
            task.id,
            task.user_id,
            task.status.value,
            task.deadline,
        )
        return task

    def get(self, task_id: int) -> Task:
        with self._session("get task") as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM tasks WHERE id = ?", (int(task_id),)
            ).fetchone()
        if row is None:
            raise TaskNotFoundError(task_id)
        return self._row_to_task(row)

    def update(self, task: Task) -> Task:
        """
        Persist every mutable field by id.

        user_id and created_at are never rewritten. An unset status keeps the
        stored one.
        """
        task.validate()
        if task.id is None:
            raise TaskNotFoundError(None)

        task.updated_at = now_local()
        status = TaskStatus.parse(task.status).value if task.status else None

        with self._session("update task") as conn:
            cur = conn.execute(
                """
                UPDATE tasks
                SET original_description = ?,
                    processed_description = ?,
                    deadline = ?,
                    status = COALESCE(?, status),
                    updated_at = ?
                WHERE id = ?
                """,
                (
                    task.original_description,
                    task.processed_description,
                    _to_ts(task.deadline),
                    status,
                    _to_ts(task.updated_at),
                    int(task.id),
                ),
            )
            affected = cur.rowcount
            row = conn.execute("SELECT status FROM tasks WHERE id = ?", (int(task.id),)).fetchone()

        if affected == 0 or row is None:
            raise TaskNotFoundError(task.id)

        task.status = TaskStatus(row["status"])
        logger.debug("Task updated id=%s status=%s", task.id, task.status.value)
        return task

    def delete(self, task_id: int) -> None:
        with self._session("delete task") as conn:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
            affected = cur.rowcount

        if affected == 0:
            raise TaskNotFoundError(task_id)
        logger.debug("Task deleted id=%s", task_id)

    def list_by_user(self, user_id: int) -> list[Task]:
        """All tasks of the user, newest first."""
        return self._query_tasks(
            "list tasks by user",
            f"""
            SELECT {_COLUMNS}
            FROM tasks
            WHERE user_id = ?
            ORDER BY created_at DESC, id DESC
            """,
            (int(user_id),),
        )

    def list_active(self, user_id: int) -> list[Task]:
        """
        Active tasks ordered by "deadline if present, else created_at" ascending.

        Deadline-bearing and deadline-less tasks share one sort key and are
        interleaved, not grouped.
        """
        return self._query_tasks(
            "list active tasks",
            f"""
            SELECT {_COLUMNS}
            FROM tasks
            WHERE user_id = ? AND status = ?
            ORDER BY COALESCE(deadline, created_at) ASC, id ASC
            """,
            (int(user_id), TaskStatus.ACTIVE.value),
        )

    def list_by_status(self, user_id: int, status: TaskStatus | str) -> list[Task]:
        """Tasks of the user with the given status, newest first."""
        return self._query_tasks(
            "list tasks by status",
            f"""
            SELECT {_COLUMNS}
            FROM tasks
            WHERE user_id = ? AND status = ?
            ORDER BY created_at DESC, id DESC
            """,
            (int(user_id), str(status)),
        )

    def list_overdue(self, user_id: int, now: datetime | None = None) -> list[Task]:
        """Active tasks whose deadline is strictly before `now`, earliest deadline first."""
        now_ts = (now or datetime.now()).timestamp()
        return self._query_tasks(
            "list overdue tasks",
            f"""
            SELECT {_COLUMNS}
            FROM tasks
            WHERE user_id = ?
              AND status = ?
              AND deadline IS NOT NULL
              AND deadline < ?
            ORDER BY deadline ASC, id ASC
            """,
            (int(user_id), TaskStatus.ACTIVE.value, float(now_ts)),
        )
