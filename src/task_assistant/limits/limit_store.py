# src/task_assistant/limits/limit_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

from ..core.errors import QuotaExceededError, StorageError
from .api_limit import FREE_REQUESTS_PER_PERIOD, APILimit

logger = logging.getLogger(__name__)


class LimitStore:
    """
    SQLite store for per-user API quotas (table api_limits).

    Shares the database file with TaskStore; every call uses its own
    short-lived connection.
    """

    def __init__(
        self,
        db_path: str | Path = "tasks.sqlite3",
        *,
        free_limit: int = FREE_REQUESTS_PER_PERIOD,
    ) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._free_limit = max(0, int(free_limit))
        self._ensure_schema()
        logger.info("LimitStore ready db=%s free_limit=%s", self._db_path, self._free_limit)

    @contextlib.contextmanager
    def _session(self, action: str) -> Iterator[sqlite3.Connection]:
        conn: sqlite3.Connection | None = None
        try:
            conn = sqlite3.connect(str(self._db_path), timeout=30.0)
            conn.row_factory = sqlite3.Row
            yield conn
            conn.commit()
        except (sqlite3.Error, OverflowError) as e:
            # OverflowError: an integer outside SQLite INTEGER range.
            raise StorageError(f"failed to {action}: {e}") from e
        finally:
            if conn is not None:
                conn.close()

    def _ensure_schema(self) -> None:
        with self._session("create api_limits schema") as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS api_limits (
                    user_id INTEGER PRIMARY KEY,
                    requests_count INTEGER NOT NULL DEFAULT 0,
                    reset_date REAL NOT NULL,
                    is_premium INTEGER NOT NULL DEFAULT 0
                )
                """
            )

    def get(self, user_id: int, now: datetime | None = None) -> APILimit:
        """Stored quota, or a fresh period for users seen for the first time."""
        with self._session("get api limit") as conn:
            row = conn.execute(
                "SELECT user_id, requests_count, reset_date, is_premium FROM api_limits WHERE user_id = ?",
                (int(user_id),),
            ).fetchone()

        if row is None:
            limit = APILimit(user_id=int(user_id), limit=self._free_limit)
            limit.reset(now)
            return limit

        return APILimit(
            user_id=int(row["user_id"]),
            requests_count=int(row["requests_count"]),
            reset_date=datetime.fromtimestamp(float(row["reset_date"])),
            is_premium=bool(row["is_premium"]),
            limit=self._free_limit,
        )

    def save(self, limit: APILimit) -> None:
        limit.validate()
        if limit.reset_date is None:
            limit.reset()

        with self._session("save api limit") as conn:
            conn.execute(
                """
                INSERT INTO api_limits(user_id, requests_count, reset_date, is_premium)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    requests_count = excluded.requests_count,
                    reset_date = excluded.reset_date,
                    is_premium = excluded.is_premium
                """,
                (
                    int(limit.user_id),
                    int(limit.requests_count),
                    limit.reset_date.timestamp(),
                    1 if limit.is_premium else 0,
                ),
            )

    def set_premium(self, user_id: int, is_premium: bool = True) -> APILimit:
        limit = self.get(user_id)
        limit.is_premium = bool(is_premium)
        self.save(limit)
        logger.info("API limit premium=%s user_id=%s", limit.is_premium, user_id)
        return limit

    def consume(self, user_id: int, now: datetime | None = None) -> APILimit:
        """
        Record one request for the user.

        Starts a new period when the previous one expired. Raises
        QuotaExceededError when the user has nothing left.
        """
        limit = self.get(user_id, now)
        if not limit.can_make_request(now):
            raise QuotaExceededError(limit.user_id, limit.limit)

        if limit.should_reset(now):
            limit.reset(now)
        limit.increment()
        self.save(limit)
        logger.debug(
            "API request recorded user_id=%s count=%s reset_date=%s",
            limit.user_id,
            limit.requests_count,
            limit.reset_date,
        )
        return limit
