"""Book and chapter data models."""

from pydantic import Field

from learnfeed.models.base import ArtifactModel


class Chapter(ArtifactModel):
    """A normalized chapter of a book."""

    chapter_id: str
    title: str
    order: int  # 0-based position in the reading order
    content: str


class Book(ArtifactModel):
    """A parsed book with its substantial chapters in reading order."""

    title: str = "Unknown"
    author: str = "Unknown"
    source_path: str = ""
    chapters: list[Chapter] = Field(default_factory=list)
