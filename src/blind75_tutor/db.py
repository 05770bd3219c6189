"""Database initialization and connection management."""
import os
import sqlite3
from pathlib import Path

DEFAULT_DB_PATH = os.environ.get(
    "BLIND75_TUTOR_DB", str(Path.home() / ".blind75_tutor" / "tutor.db")
)

SCHEMA = """
CREATE TABLE IF NOT EXISTS problems (
    title TEXT PRIMARY KEY,
    difficulty TEXT NOT NULL CHECK (difficulty IN ('easy', 'medium', 'hard')),
    problem_group TEXT NOT NULL DEFAULT '',
    position INTEGER NOT NULL,
    prompt TEXT DEFAULT '',
    key_idea TEXT DEFAULT '',
    detailed_hint TEXT DEFAULT ''
);

CREATE TABLE IF NOT EXISTS user_study_settings (
    user_id TEXT PRIMARY KEY,
    target_days INTEGER DEFAULT 10,
    daily_cap INTEGER DEFAULT 15,
    easy_bonus INTEGER DEFAULT 10,
    start_date TEXT,
    created_at TEXT,
    updated_at TEXT
);

CREATE TABLE IF NOT EXISTS user_problem_progress (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    problem_title TEXT NOT NULL,
    status TEXT DEFAULT 'new' CHECK (status IN ('new', 'learning', 'mastered')),
    best_score INTEGER,
    reviews_needed INTEGER DEFAULT 2,
    reviews_completed INTEGER DEFAULT 0,
    last_reviewed_at TEXT,
    next_review_at TEXT,
    created_at TEXT,
    updated_at TEXT,
    UNIQUE(user_id, problem_title)
);

CREATE INDEX IF NOT EXISTS idx_user_problem_progress_next_review
    ON user_problem_progress(user_id, next_review_at);
"""


class PersistenceError(Exception):
    """Raised when a read or write against the store fails."""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory and foreign keys enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()
