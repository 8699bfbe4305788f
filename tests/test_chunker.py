"""Tests for sentence segmentation and the greedy post chunker."""

import pytest

from learnfeed.config import ChunkingConfig
from learnfeed.ingestion.chunker import ELLIPSIS, PostChunker, truncate_to_max_chars
from learnfeed.ingestion.segmenter import split_sentences
from learnfeed.keys import post_key
from learnfeed.models.book import Book, Chapter


@pytest.fixture
def chunker() -> PostChunker:
    return PostChunker(ChunkingConfig())


def _make_book(content: str, title: str = "Test Book") -> Book:
    return Book(
        title=title,
        author="Test Author",
        chapters=[Chapter(chapter_id="chap-1", title="Chapter 1", order=0, content=content)],
    )


def _numbered_words(count: int) -> str:
    # Every word is 7 characters, so word k starts at 8 * k.
    return " ".join(f"word{i:03d}" for i in range(count))


# ── Sentence segmentation ───────────────────────────────────────────────────


class TestSplitSentences:
    def test_splits_on_terminal_punctuation(self) -> None:
        text = (
            "This is a substantial sentence! Is this one also long enough? "
            "Yes it really is long enough."
        )
        assert split_sentences(text) == [
            "This is a substantial sentence",
            "Is this one also long enough",
            "Yes it really is long enough.",
        ]

    def test_drops_short_fragments(self) -> None:
        text = "Short. Tiny one. This sentence is clearly long enough. Ok"
        assert split_sentences(text) == ["This sentence is clearly long enough"]

    def test_fragment_of_exactly_min_length_is_dropped(self) -> None:
        exact = "a" * 20
        longer = "b" * 21
        assert split_sentences(f"{exact}. {longer}.") == [f"{longer}."]

    def test_punctuation_runs_split_once(self) -> None:
        text = "Wait for it... something happens next?! And then the story goes on"
        assert split_sentences(text) == [
            "something happens next",
            "And then the story goes on",
        ]

    def test_empty_text(self) -> None:
        assert split_sentences("") == []


# ── Truncation ───────────────────────────────────────────────────────────────


class TestTruncateToMaxChars:
    def test_short_text_unchanged(self) -> None:
        assert truncate_to_max_chars("Already short.") == "Already short."

    def test_exactly_max_chars_unchanged(self) -> None:
        text = "a" * 150
        assert truncate_to_max_chars(text) == text

    def test_cuts_after_late_sentence_end(self) -> None:
        text = "A" * 120 + ". " + "b" * 100
        assert truncate_to_max_chars(text) == "A" * 120 + "."

    def test_early_sentence_end_falls_back_to_word_boundary(self) -> None:
        text = "Early end. " + _numbered_words(30)
        result = truncate_to_max_chars(text)
        assert result.endswith(ELLIPSIS)
        assert len(result) <= 150
        assert text.startswith(result[: -len(ELLIPSIS)])

    def test_word_boundary_when_punctuation_is_past_the_limit(self) -> None:
        # 200 characters with the only terminal punctuation at index 195
        text = _numbered_words(24) + " fin." + "abcd"
        assert len(text) == 200
        assert text.index(".") == 195

        result = truncate_to_max_chars(text)

        assert result == _numbered_words(18) + ELLIPSIS
        assert len(result) <= 150

    def test_hard_cut_without_spaces(self) -> None:
        result = truncate_to_max_chars("x" * 200)
        assert result == "x" * 147 + ELLIPSIS
        assert len(result) == 150

    def test_custom_budget(self) -> None:
        result = truncate_to_max_chars("one two three four five six", max_chars=12)
        assert result == "one two..."


# ── Post chunking ────────────────────────────────────────────────────────────


class TestPostChunker:
    def test_merges_two_short_sentences(self, chunker: PostChunker) -> None:
        content = (
            "This is a short sentence. "
            "This is another slightly longer sentence that extends things."
        )
        book = _make_book(content)

        assert len(split_sentences(content)) == 2
        posts = chunker.chunk_book(book)

        assert len(posts) == 1
        assert posts[0].content == content
        assert len(posts[0].content) <= 150

    def test_does_not_merge_beyond_budget(self, chunker: PostChunker) -> None:
        sentence = "This sentence is about seventy characters long and it keeps going on forever"
        content = ". ".join([sentence + " one", sentence + " two", sentence + " six"]) + "."
        posts = chunker.chunk_book(_make_book(content))

        assert [p.content for p in posts] == [
            sentence + " one.",
            sentence + " two.",
            sentence + " six.",
        ]

    def test_merges_pairs_then_emits_remainder(self, chunker: PostChunker) -> None:
        content = (
            "The first sentence is short enough. "
            "The second sentence is short enough. "
            "The third sentence is short enough."
        )
        posts = chunker.chunk_book(_make_book(content))

        assert [p.content for p in posts] == [
            "The first sentence is short enough. The second sentence is short enough.",
            "The third sentence is short enough.",
        ]

    def test_appends_terminal_punctuation(self, chunker: PostChunker) -> None:
        posts = chunker.chunk_book(_make_book("A final sentence that never gets its period"))
        assert posts[0].content == "A final sentence that never gets its period."

    def test_long_sentence_is_truncated_alone(self, chunker: PostChunker) -> None:
        content = _numbered_words(30) + ". A following sentence that would fit alone."
        posts = chunker.chunk_book(_make_book(content))

        assert len(posts) == 2
        assert posts[0].content.endswith(ELLIPSIS)
        assert posts[1].content == "A following sentence that would fit alone."

    def test_caps_posts_per_chapter(self, chunker: PostChunker) -> None:
        sentence = "Sentence {:02d} explains an idea that needs quite a lot of words to be clear and precise"
        content = ". ".join(sentence.format(i) for i in range(40)) + "."
        posts = chunker.chunk_book(_make_book(content))

        assert len(posts) == 15
        assert [p.post_index for p in posts] == list(range(15))
        assert posts[-1].content.startswith("Sentence 14")

    def test_cap_is_configurable(self) -> None:
        chunker = PostChunker(ChunkingConfig(posts_per_chapter=2))
        sentence = "Sentence {:02d} explains an idea that needs quite a lot of words to be clear and precise"
        content = ". ".join(sentence.format(i) for i in range(10)) + "."
        assert len(chunker.chunk_book(_make_book(content))) == 2

    def test_post_metadata_and_keys(self, chunker: PostChunker) -> None:
        sentence = "Sentence {:02d} explains an idea that needs quite a lot of words to be clear and precise"
        content = ". ".join(sentence.format(i) for i in range(3)) + "."
        book = _make_book(content, title="Deep Work")
        posts = chunker.chunk_book(book)

        for index, post in enumerate(posts):
            assert post.key == post_key("Deep Work", "chap-1", index)
            assert post.book_title == "Deep Work"
            assert post.book_author == "Test Author"
            assert post.chapter_title == "Chapter 1"
            assert post.chapter_order == 0
            assert post.type == "learning"

    def test_posts_never_span_chapters(self, chunker: PostChunker) -> None:
        book = Book(
            title="Two Chapters",
            chapters=[
                Chapter(chapter_id="a", title="A", order=0, content="Chapter A has one sentence only"),
                Chapter(chapter_id="b", title="B", order=1, content="Chapter B has one sentence too"),
            ],
        )
        posts = chunker.chunk_book(book)

        assert [(p.chapter_id, p.post_index) for p in posts] == [("a", 0), ("b", 0)]
        assert posts[0].content == "Chapter A has one sentence only."

    def test_chapter_without_sentences_yields_nothing(self, chunker: PostChunker) -> None:
        assert chunker.chunk_book(_make_book("Too short. Also short.")) == []

    def test_length_invariant(self, chunker: PostChunker) -> None:
        parts = []
        for i in range(60):
            length = 15 + (i * 37) % 260
            parts.append(("lorem ipsum dolor " * 20)[:length].strip() + f" {i}")
        parts.append("x" * 400)
        content = ". ".join(parts) + "."
        book = Book(
            title="Stress",
            chapters=[
                Chapter(chapter_id=f"c{n}", title=f"C{n}", order=n, content=content)
                for n in range(3)
            ],
        )

        posts = chunker.chunk_book(book)

        assert posts
        for post in posts:
            assert len(post.content) <= 150
            assert post.content[-1] in ".!?" or post.content.endswith(ELLIPSIS)
