"""Idempotent corpus storage for posts and questions."""

import json
import logging
import sqlite3
from collections.abc import Iterable
from pathlib import Path

from learnfeed.models.post import Post
from learnfeed.models.question import Answer, Question
from learnfeed.models.upsert import UpsertResult
from learnfeed.storage.database import get_connection, initialize_database

logger = logging.getLogger(__name__)

_INSERT_POST = """
    INSERT INTO posts (
        key, book_title, book_author, chapter_title, chapter_id,
        chapter_order, post_index, content, type
    )
    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
    ON CONFLICT (key) DO NOTHING
"""

_INSERT_QUESTION = """
    INSERT INTO questions (
        key, post_key, title, question_text, book_title,
        chapter_title, answers_json, type
    )
    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
    ON CONFLICT (key) DO NOTHING
"""


class CorpusRepository:
    """Insert-or-skip storage keyed on content-addressed keys.

    Each call opens its own connection and runs one transaction per
    batch. An existing key is never updated; it is counted as skipped.
    Storage errors propagate to the caller.

    Args:
        db_path: Path to the SQLite database file. The file and its
                 schema are created on first use, not on construction.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._initialized = False

    def upsert_posts(self, posts: Iterable[Post]) -> UpsertResult:
        rows = (
            (
                p.key,
                p.book_title,
                p.book_author,
                p.chapter_title,
                p.chapter_id,
                p.chapter_order,
                p.post_index,
                p.content,
                p.type,
            )
            for p in posts
        )
        return self._insert_or_skip(_INSERT_POST, rows)

    def upsert_questions(self, questions: Iterable[Question]) -> UpsertResult:
        rows = (
            (
                q.key,
                q.post_key,
                q.title,
                q.question_text,
                q.book_title,
                q.chapter_title,
                json.dumps([a.model_dump(by_alias=True) for a in q.answers]),
                q.type,
            )
            for q in questions
        )
        return self._insert_or_skip(_INSERT_QUESTION, rows)

    def get_post(self, key: str) -> Post | None:
        conn = self._connect()
        try:
            row = conn.execute("SELECT * FROM posts WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        data = dict(row)
        data.pop("created_at", None)
        return Post(**data)

    def get_question(self, key: str) -> Question | None:
        conn = self._connect()
        try:
            row = conn.execute("SELECT * FROM questions WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        data = dict(row)
        data.pop("created_at", None)
        answers = [Answer(**a) for a in json.loads(data.pop("answers_json"))]
        return Question(answers=answers, **data)

    def count_posts(self) -> int:
        return self._count("posts")

    def count_questions(self) -> int:
        return self._count("questions")

    def _count(self, table: str) -> int:
        conn = self._connect()
        try:
            return int(conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0])
        finally:
            conn.close()

    def _connect(self) -> sqlite3.Connection:
        if not self._initialized:
            initialize_database(self._db_path)
            self._initialized = True
        return get_connection(self._db_path)

    def _insert_or_skip(self, statement: str, rows: Iterable[tuple]) -> UpsertResult:
        result = UpsertResult()
        conn = self._connect()
        try:
            with conn:
                for row in rows:
                    cursor = conn.execute(statement, row)
                    if cursor.rowcount > 0:
                        result.inserted += 1
                    else:
                        result.skipped += 1
        finally:
            conn.close()
        return result
