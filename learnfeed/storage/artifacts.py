"""Durable JSON artifacts passed between pipeline stages."""

import json
import logging
from pathlib import Path
from typing import TypeVar

from pydantic import TypeAdapter

from learnfeed.errors import MissingArtifactError
from learnfeed.models.book import Book
from learnfeed.models.post import Post
from learnfeed.models.question import Question

logger = logging.getLogger(__name__)

T = TypeVar("T")

BOOKS_FILE = "parsed-books.json"
POSTS_FILE = "posts.json"
QUESTIONS_FILE = "questions.json"
TRACKING_FILE = "questions-tracking.json"

_BOOKS = TypeAdapter(list[Book])
_POSTS = TypeAdapter(list[Post])
_QUESTIONS = TypeAdapter(list[Question])


class ArtifactStore:
    """Reads and writes the pipeline's intermediate JSON files.

    Files use camelCase keys and two-space indentation.

    Args:
        data_dir: Directory holding the artifacts.
    """

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)

    def path(self, name: str) -> Path:
        return self.data_dir / name

    def exists(self, name: str) -> bool:
        return self.path(name).exists()

    def write_books(self, books: list[Book]) -> Path:
        return self._write(BOOKS_FILE, _BOOKS, books)

    def read_books(self) -> list[Book]:
        return self._read(BOOKS_FILE, _BOOKS, prerequisite="parse")

    def write_posts(self, posts: list[Post]) -> Path:
        return self._write(POSTS_FILE, _POSTS, posts)

    def read_posts(self) -> list[Post]:
        return self._read(POSTS_FILE, _POSTS, prerequisite="posts")

    def write_questions(self, questions: list[Question]) -> Path:
        return self._write(QUESTIONS_FILE, _QUESTIONS, questions)

    def read_questions(self) -> list[Question]:
        return self._read(QUESTIONS_FILE, _QUESTIONS, prerequisite="questions")

    def write_tracking(self, generated_for: list[str]) -> Path:
        path = self.path(TRACKING_FILE)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps({"generatedFor": generated_for}, indent=2), encoding="utf-8")
        return path

    def read_tracking(self) -> list[str]:
        """Return tracked post keys, or an empty list if never written."""
        path = self.path(TRACKING_FILE)
        if not path.exists():
            return []
        data = json.loads(path.read_text(encoding="utf-8"))
        return list(data.get("generatedFor", []))

    def _write(self, name: str, adapter: TypeAdapter[list[T]], items: list[T]) -> Path:
        path = self.path(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(adapter.dump_json(items, by_alias=True, indent=2))
        logger.info("Saved %d records to %s", len(items), path)
        return path

    def _read(self, name: str, adapter: TypeAdapter[list[T]], prerequisite: str) -> list[T]:
        path = self.path(name)
        if not path.exists():
            raise MissingArtifactError(
                str(path), f"Please run the '{prerequisite}' stage first."
            )
        return adapter.validate_json(path.read_bytes())
