"""Data models for the learnfeed pipeline."""

from learnfeed.models.book import Book, Chapter
from learnfeed.models.post import Post
from learnfeed.models.question import Answer, Question, QuestionBatch
from learnfeed.models.upsert import UpsertResult

__all__ = [
    "Answer",
    "Book",
    "Chapter",
    "Post",
    "Question",
    "QuestionBatch",
    "UpsertResult",
]
