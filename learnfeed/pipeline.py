"""Pipeline stages: parse, posts, questions and seed.

Each stage reads the artifact written by the previous one and fails
with MissingArtifactError before processing anything when it is absent.
"""

import logging
import random

from learnfeed.config import AppConfig
from learnfeed.generation.questions import QuestionGenerator
from learnfeed.ingestion.chunker import PostChunker
from learnfeed.ingestion.parser import BookParser
from learnfeed.models.book import Book
from learnfeed.models.post import Post
from learnfeed.models.question import QuestionBatch
from learnfeed.models.upsert import UpsertResult
from learnfeed.storage.artifacts import QUESTIONS_FILE, ArtifactStore
from learnfeed.storage.repository import CorpusRepository

logger = logging.getLogger(__name__)


def parse_books(config: AppConfig) -> list[Book]:
    """Parse every EPUB in the books directory into parsed-books.json."""
    parser = BookParser(config.parsing)
    books = parser.parse_directory(config.storage.books_dir)
    ArtifactStore(config.storage.data_dir).write_books(books)
    logger.info("Parsed %d books successfully", len(books))
    return books


def generate_posts(config: AppConfig) -> list[Post]:
    """Chunk parsed books into posts.json."""
    store = ArtifactStore(config.storage.data_dir)
    books = store.read_books()
    chunker = PostChunker(config.chunking)

    logger.info("Generating posts from %d books", len(books))
    posts: list[Post] = []
    for book in books:
        book_posts = chunker.chunk_book(book)
        logger.info(
            "%s: %d chapters, %d posts", book.title, len(book.chapters), len(book_posts)
        )
        posts.extend(book_posts)

    store.write_posts(posts)
    logger.info("Generated %d posts successfully", len(posts))
    return posts


def generate_questions(
    config: AppConfig, rng: random.Random | None = None, force: bool = False
) -> QuestionBatch:
    """Generate questions for posts not yet covered by the tracking file.

    Previously generated questions are kept and merged by key. With
    ``force`` the tracking file is ignored and every post is processed
    again; regenerated questions keep their keys. The tracking file is
    also ignored when questions.json is missing.

    Returns:
        The questions generated in this run.
    """
    store = ArtifactStore(config.storage.data_dir)
    posts = store.read_posts()

    has_questions = store.exists(QUESTIONS_FILE)
    existing = store.read_questions() if has_questions else []
    # The tracking file only counts alongside questions.json
    tracked = store.read_tracking() if has_questions and not force else []
    if tracked:
        logger.info("Skipping %d posts that already have questions", len(tracked))

    generator = QuestionGenerator(config.questions, rng=rng)
    batch = generator.generate(posts, skip_post_keys=tracked)

    merged = {question.key: question for question in existing}
    for question in batch.questions:
        merged[question.key] = question
    generated_for = list(dict.fromkeys([*tracked, *batch.generated_for]))

    store.write_questions(list(merged.values()))
    store.write_tracking(generated_for)
    logger.info(
        "Generated %d new questions (%d total) covering %d posts",
        len(batch.questions),
        len(merged),
        len(generated_for),
    )
    return batch


def seed_database(config: AppConfig, repository: CorpusRepository) -> dict[str, UpsertResult]:
    """Upsert posts and questions into the corpus.

    posts.json is required; questions.json is optional. Storage errors
    propagate and abort the run; rerunning is safe.

    Returns:
        Upsert counts keyed by "posts" and "questions".
    """
    store = ArtifactStore(config.storage.data_dir)
    posts = store.read_posts()

    logger.info("Seeding %d posts", len(posts))
    results = {"posts": repository.upsert_posts(posts)}

    if store.exists(QUESTIONS_FILE):
        questions = store.read_questions()
        logger.info("Seeding %d questions", len(questions))
        results["questions"] = repository.upsert_questions(questions)
    else:
        logger.warning("%s not found, seeding posts only", store.path(QUESTIONS_FILE))
        results["questions"] = UpsertResult()

    for entity, result in results.items():
        logger.info(
            "Seeded %d %s (%d skipped as duplicates)", result.inserted, entity, result.skipped
        )
    return results


def run_all(
    config: AppConfig,
    repository: CorpusRepository,
    rng: random.Random | None = None,
) -> dict[str, UpsertResult]:
    """Run every stage in order."""
    parse_books(config)
    generate_posts(config)
    generate_questions(config, rng=rng)
    return seed_database(config, repository)
