"""Learning post data model."""

from typing import Literal

from learnfeed.models.base import ArtifactModel


class Post(ArtifactModel):
    """A short chapter-scoped excerpt delivered in the learning feed."""

    key: str
    book_title: str
    book_author: str = "Unknown"
    chapter_title: str
    chapter_id: str
    chapter_order: int
    post_index: int
    content: str
    type: Literal["learning"] = "learning"
