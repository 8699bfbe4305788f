"""Multiple-choice question generation from learning posts."""

import logging
import random
from collections import Counter
from collections.abc import Iterable

from learnfeed.config import QuestionConfig
from learnfeed.generation.concepts import extract_key_concepts
from learnfeed.generation.distractors import DistractorSynthesizer
from learnfeed.generation.shuffler import shuffle_answers
from learnfeed.keys import question_key
from learnfeed.models.post import Post
from learnfeed.models.question import Answer, Question, QuestionBatch

logger = logging.getLogger(__name__)

STEM_PREVIEW_CHARS = 100


class QuestionGenerator:
    """Builds comprehension questions for posts.

    Each post yields one question per extracted concept, capped at
    ``questions_per_post``. The concept itself is the correct answer;
    three synthesized distractors complete the options, which are then
    shuffled.

    Args:
        config: QuestionConfig with per-post cap, distractor settings
                and importance markers.
        rng: Random source shared by distractor synthesis and shuffling.
    """

    def __init__(
        self, config: QuestionConfig | None = None, rng: random.Random | None = None
    ) -> None:
        self._config = config or QuestionConfig()
        self._rng = rng or random.Random()
        self._distractors = DistractorSynthesizer(
            rng=self._rng,
            count=self._config.distractor_count,
            max_offset=self._config.max_numeric_offset,
        )

    def generate(
        self, posts: Iterable[Post], skip_post_keys: Iterable[str] = ()
    ) -> QuestionBatch:
        """Generate questions for every post not already covered.

        Args:
            posts: Posts to process, usually in artifact order.
            skip_post_keys: Keys of posts that already have questions.

        Returns:
            A QuestionBatch with the new questions and the keys of the
            posts that received at least one.
        """
        skip = set(skip_post_keys)
        batch = QuestionBatch()
        per_book: Counter[str] = Counter()

        for post in posts:
            if post.key in skip:
                continue
            questions = self.generate_for_post(post)
            if questions:
                batch.questions.extend(questions)
                batch.generated_for.append(post.key)
                per_book[post.book_title] += len(questions)

        for title, count in per_book.items():
            logger.info("%s: generated %d questions", title, count)

        return batch

    def generate_for_post(self, post: Post) -> list[Question]:
        """Generate up to questions_per_post questions for a single post."""
        concepts = extract_key_concepts(post.content, self._config.importance_markers)
        return [
            self._build_question(post, index, concept)
            for index, concept in enumerate(concepts[: self._config.questions_per_post])
        ]

    def _build_question(self, post: Post, index: int, concept: str) -> Question:
        answers = [Answer(text=concept, is_correct=True)]
        answers.extend(
            Answer(text=text, is_correct=False)
            for text in self._distractors.generate(concept)
        )

        return Question(
            key=question_key(post.key, index),
            post_key=post.key,
            title=f"Question about {post.chapter_title}",
            question_text=(
                f'Based on the content: "{concept[:STEM_PREVIEW_CHARS]}...", '
                "which statement is most accurate?"
            ),
            book_title=post.book_title,
            chapter_title=post.chapter_title,
            answers=shuffle_answers(answers, self._rng),
        )
