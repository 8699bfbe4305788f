"""Greedy post chunker packing sentences under a character budget."""

import logging
import re

from learnfeed.config import ChunkingConfig
from learnfeed.ingestion.segmenter import split_sentences
from learnfeed.keys import post_key
from learnfeed.models.book import Book, Chapter
from learnfeed.models.post import Post

logger = logging.getLogger(__name__)

ELLIPSIS = "..."
TERMINAL_PUNCTUATION = re.compile(r"[.!?]$")


def truncate_to_max_chars(
    text: str, max_chars: int = 150, boundary_ratio: float = 0.7
) -> str:
    """Shorten text to at most max_chars, preferring natural boundaries.

    If the last sentence end inside the first max_chars characters lies
    beyond ``boundary_ratio * max_chars``, the text is cut right after it.
    Otherwise it is cut at the last word boundary and an ellipsis is
    appended; with no space at all it is cut hard.

    Args:
        text: The text to shorten.
        max_chars: Character budget.
        boundary_ratio: Fraction of the budget a sentence end must pass.

    Returns:
        Text of length <= max_chars.
    """
    if len(text) <= max_chars:
        return text

    truncated = text[:max_chars]
    last_sentence_end = max(truncated.rfind("."), truncated.rfind("!"), truncated.rfind("?"))
    if last_sentence_end > max_chars * boundary_ratio:
        return truncated[: last_sentence_end + 1]

    # Leave room for the ellipsis
    budget = truncated[: max_chars - len(ELLIPSIS)]
    last_space = budget.rfind(" ")
    if last_space > 0:
        return budget[:last_space] + ELLIPSIS
    return budget + ELLIPSIS


def _terminate(sentence: str) -> str:
    if TERMINAL_PUNCTUATION.search(sentence):
        return sentence
    return sentence + "."


class PostChunker:
    """Packs chapter sentences into short learning posts.

    One left-to-right pass per chapter: a sentence that is too long is
    truncated into its own post, otherwise the next sentence is merged
    in when both fit the budget together. Posts never span chapters.

    Args:
        config: ChunkingConfig with max_post_chars, posts_per_chapter,
                min_sentence_chars and boundary_ratio settings.
    """

    def __init__(self, config: ChunkingConfig | None = None) -> None:
        self._config = config or ChunkingConfig()

    def chunk_book(self, book: Book) -> list[Post]:
        """Generate posts for every chapter of a book, in chapter order."""
        posts: list[Post] = []
        for chapter in book.chapters:
            chapter_posts = self.chunk_chapter(book, chapter)
            if chapter_posts:
                logger.debug(
                    "Chapter %d of %r: generated %d posts",
                    chapter.order + 1,
                    book.title,
                    len(chapter_posts),
                )
            posts.extend(chapter_posts)
        return posts

    def chunk_chapter(self, book: Book, chapter: Chapter) -> list[Post]:
        """Generate at most posts_per_chapter posts from one chapter.

        Args:
            book: The owning book (title and author metadata).
            chapter: The chapter to split.

        Returns:
            Posts with sequential post_index values starting at 0.
        """
        max_chars = self._config.max_post_chars
        sentences = split_sentences(chapter.content, self._config.min_sentence_chars)
        posts: list[Post] = []

        i = 0
        while i < len(sentences) and len(posts) < self._config.posts_per_chapter:
            content = _terminate(sentences[i])

            if len(content) > max_chars:
                content = truncate_to_max_chars(
                    content, max_chars, self._config.boundary_ratio
                )
            elif i + 1 < len(sentences):
                combined = content + " " + _terminate(sentences[i + 1])
                if len(combined) <= max_chars:
                    content = combined
                    i += 1

            post_index = len(posts)
            posts.append(
                Post(
                    key=post_key(book.title, chapter.chapter_id, post_index),
                    book_title=book.title,
                    book_author=book.author,
                    chapter_title=chapter.title,
                    chapter_id=chapter.chapter_id,
                    chapter_order=chapter.order,
                    post_index=post_index,
                    content=content,
                )
            )
            i += 1

        return posts
