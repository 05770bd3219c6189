"""SQLite-backed store for the catalog, study settings and problem progress.

Every method opens its own connection and wraps ``sqlite3.Error`` in
:class:`~blind75_tutor.db.PersistenceError`, so callers deal with a single
failure type regardless of what went wrong underneath.
"""
import sqlite3
from contextlib import contextmanager
from datetime import datetime, time, timedelta
from typing import Iterable, Optional

from blind75_tutor.db import DEFAULT_DB_PATH, PersistenceError, get_connection
from blind75_tutor.models import MASTERED, Problem, UserProblemProgress, UserStudySettings

SETTINGS_COLUMNS = ("target_days", "daily_cap", "easy_bonus", "start_date")
PROGRESS_COLUMNS = (
    "status", "best_score", "reviews_needed", "reviews_completed",
    "last_reviewed_at", "next_review_at",
)


def _to_text(value):
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _to_datetime(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _row_to_settings(row: sqlite3.Row) -> UserStudySettings:
    return UserStudySettings(
        user_id=row["user_id"],
        target_days=row["target_days"],
        daily_cap=row["daily_cap"],
        easy_bonus=row["easy_bonus"],
        start_date=_to_datetime(row["start_date"]) or datetime.now(),
    )


def _row_to_progress(row: sqlite3.Row) -> UserProblemProgress:
    return UserProblemProgress(
        user_id=row["user_id"],
        problem_title=row["problem_title"],
        status=row["status"],
        best_score=row["best_score"],
        reviews_needed=row["reviews_needed"],
        reviews_completed=row["reviews_completed"],
        last_reviewed_at=_to_datetime(row["last_reviewed_at"]),
        next_review_at=_to_datetime(row["next_review_at"]),
    )


def _row_to_problem(row: sqlite3.Row) -> Problem:
    return Problem(
        title=row["title"],
        difficulty=row["difficulty"],
        problem_group=row["problem_group"] or "",
        prompt=row["prompt"] or "",
        key_idea=row["key_idea"] or "",
        detailed_hint=row["detailed_hint"] or "",
    )


class ProgressStore:
    """CRUD access to settings, progress records and the problem catalog."""

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        self.db_path = db_path

    @contextmanager
    def _connect(self):
        conn = None
        try:
            conn = get_connection(self.db_path)
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            if conn is not None:
                conn.rollback()
            raise PersistenceError(f"store operation failed: {e}") from e
        finally:
            if conn is not None:
                conn.close()

    # -- settings ---------------------------------------------------------

    def fetch_settings(self, user_id: str) -> UserStudySettings | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM user_study_settings WHERE user_id = ?", (user_id,)
            ).fetchone()
        return _row_to_settings(row) if row else None

    def upsert_settings(self, user_id: str, fields: dict) -> UserStudySettings | None:
        """Write only the supplied columns; other columns keep their value."""
        unknown = set(fields) - set(SETTINGS_COLUMNS)
        if unknown:
            raise ValueError(f"unknown settings fields: {sorted(unknown)}")
        columns = [c for c in SETTINGS_COLUMNS if c in fields]
        now = datetime.now().isoformat()
        values = [_to_text(fields[c]) for c in columns]
        assignments = "".join(f", {c} = excluded.{c}" for c in columns)
        with self._connect() as conn:
            conn.execute(
                f"""INSERT INTO user_study_settings
                (user_id, {''.join(c + ', ' for c in columns)}created_at, updated_at)
                VALUES (?, {'?, ' * len(columns)}?, ?)
                ON CONFLICT(user_id) DO UPDATE SET updated_at = excluded.updated_at{assignments}""",
                (user_id, *values, now, now),
            )
            row = conn.execute(
                "SELECT * FROM user_study_settings WHERE user_id = ?", (user_id,)
            ).fetchone()
        return _row_to_settings(row) if row else None

    # -- progress ---------------------------------------------------------

    def fetch_all_progress(self, user_id: str) -> list[UserProblemProgress]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM user_problem_progress WHERE user_id = ? ORDER BY id",
                (user_id,),
            ).fetchall()
        return [_row_to_progress(r) for r in rows]

    def fetch_progress(self, user_id: str, problem_title: str) -> UserProblemProgress | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM user_problem_progress WHERE user_id = ? AND problem_title = ?",
                (user_id, problem_title),
            ).fetchone()
        return _row_to_progress(row) if row else None

    def fetch_due_reviews(self, user_id: str, now: datetime | None = None) -> list[UserProblemProgress]:
        """Records whose next review has passed and that are not mastered, most overdue first."""
        now = now or datetime.now()
        with self._connect() as conn:
            rows = conn.execute(
                """SELECT * FROM user_problem_progress
                WHERE user_id = ? AND next_review_at IS NOT NULL
                    AND next_review_at <= ? AND status != ?
                ORDER BY next_review_at ASC, id ASC""",
                (user_id, now.isoformat(), MASTERED),
            ).fetchall()
        return [_row_to_progress(r) for r in rows]

    def fetch_due_tomorrow(self, user_id: str, now: datetime | None = None) -> list[UserProblemProgress]:
        """Records scheduled within the following calendar day."""
        now = now or datetime.now()
        start = datetime.combine(now.date() + timedelta(days=1), time.min)
        end = start + timedelta(days=1)
        with self._connect() as conn:
            rows = conn.execute(
                """SELECT * FROM user_problem_progress
                WHERE user_id = ? AND next_review_at >= ? AND next_review_at < ?
                ORDER BY next_review_at ASC, id ASC""",
                (user_id, start.isoformat(), end.isoformat()),
            ).fetchall()
        return [_row_to_progress(r) for r in rows]

    def upsert_progress(self, user_id: str, problem_title: str, fields: dict) -> UserProblemProgress | None:
        with self._connect() as conn:
            self._upsert_progress_row(conn, user_id, problem_title, fields)
            row = conn.execute(
                "SELECT * FROM user_problem_progress WHERE user_id = ? AND problem_title = ?",
                (user_id, problem_title),
            ).fetchone()
        return _row_to_progress(row) if row else None

    def batch_upsert_progress(self, user_id: str, items: Iterable[dict]) -> bool:
        """Upsert many records in one transaction. Each item carries ``problem_title``."""
        with self._connect() as conn:
            for item in items:
                fields = {k: v for k, v in item.items() if k != "problem_title"}
                self._upsert_progress_row(conn, user_id, item["problem_title"], fields)
        return True

    def delete_progress(self, user_id: str, problem_title: str | None = None) -> int:
        """Delete one record, or every record of the user when no title is given."""
        with self._connect() as conn:
            if problem_title is None:
                cur = conn.execute(
                    "DELETE FROM user_problem_progress WHERE user_id = ?", (user_id,)
                )
            else:
                cur = conn.execute(
                    "DELETE FROM user_problem_progress WHERE user_id = ? AND problem_title = ?",
                    (user_id, problem_title),
                )
            deleted = cur.rowcount
        return deleted

    @staticmethod
    def _upsert_progress_row(conn, user_id: str, problem_title: str, fields: dict) -> None:
        unknown = set(fields) - set(PROGRESS_COLUMNS)
        if unknown:
            raise ValueError(f"unknown progress fields: {sorted(unknown)}")
        columns = [c for c in PROGRESS_COLUMNS if c in fields]
        now = datetime.now().isoformat()
        values = [_to_text(fields[c]) for c in columns]
        assignments = "".join(f", {c} = excluded.{c}" for c in columns)
        conn.execute(
            f"""INSERT INTO user_problem_progress
            (user_id, problem_title, {''.join(c + ', ' for c in columns)}created_at, updated_at)
            VALUES (?, ?, {'?, ' * len(columns)}?, ?)
            ON CONFLICT(user_id, problem_title) DO UPDATE SET updated_at = excluded.updated_at{assignments}""",
            (user_id, problem_title, *values, now, now),
        )

    # -- catalog ----------------------------------------------------------

    def fetch_all_problems(self) -> list[Problem]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM problems ORDER BY position").fetchall()
        return [_row_to_problem(r) for r in rows]

    def insert_problems(self, problems: Iterable[Problem]) -> int:
        """Append problems after the current catalog, skipping titles already present."""
        inserted = 0
        with self._connect() as conn:
            position = conn.execute("SELECT COALESCE(MAX(position), -1) FROM problems").fetchone()[0]
            for p in problems:
                position += 1
                cur = conn.execute(
                    """INSERT OR IGNORE INTO problems
                    (title, difficulty, problem_group, position, prompt, key_idea, detailed_hint)
                    VALUES (?, ?, ?, ?, ?, ?, ?)""",
                    (p.title, p.difficulty, p.problem_group, position,
                     p.prompt, p.key_idea, p.detailed_hint),
                )
                inserted += cur.rowcount
        return inserted
