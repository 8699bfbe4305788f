"""SQLite database initialization and connection management."""

import sqlite3
from pathlib import Path


def get_connection(db_path: str | Path) -> sqlite3.Connection:
    """Create a connection to the SQLite database.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        A sqlite3 Connection with row_factory set to Row.
    """
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def initialize_database(db_path: str | Path) -> None:
    """Create the corpus schema if it doesn't exist.

    The primary key on ``key`` in both tables is what makes corpus
    upserts idempotent.

    Args:
        db_path: Path to the SQLite database file.
    """
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = get_connection(db_path)
    try:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS posts (
                key TEXT PRIMARY KEY,
                book_title TEXT NOT NULL,
                book_author TEXT DEFAULT '',
                chapter_title TEXT NOT NULL,
                chapter_id TEXT NOT NULL,
                chapter_order INTEGER NOT NULL,
                post_index INTEGER NOT NULL,
                content TEXT NOT NULL,
                type TEXT DEFAULT 'learning',
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );

            CREATE TABLE IF NOT EXISTS questions (
                key TEXT PRIMARY KEY,
                post_key TEXT NOT NULL,
                title TEXT NOT NULL,
                question_text TEXT NOT NULL,
                book_title TEXT NOT NULL,
                chapter_title TEXT NOT NULL,
                answers_json TEXT NOT NULL,
                type TEXT DEFAULT 'multiple-choice',
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );

            CREATE INDEX IF NOT EXISTS idx_questions_post_key
                ON questions (post_key);
            """
        )
        conn.commit()
    finally:
        conn.close()
