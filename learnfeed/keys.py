"""Content-addressed keys for posts and questions.

Keys are the first 16 hex characters of a SHA-256 digest over the
item's logical coordinates, so identical input always yields the same
key across runs and processes.
"""

import hashlib

KEY_LENGTH = 16


def _digest(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:KEY_LENGTH]


def post_key(book_title: str, chapter_id: str, post_index: int) -> str:
    """Derive the key of a post from its book, chapter and position."""
    return _digest(f"{book_title}-{chapter_id}-{post_index}")


def question_key(post_key: str, question_index: int) -> str:
    """Derive the key of a question from its post key and local index."""
    return _digest(f"{post_key}-question-{question_index}")
