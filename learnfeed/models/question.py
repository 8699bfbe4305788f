"""Multiple-choice question data models."""

from typing import Literal

from pydantic import Field, field_validator

from learnfeed.models.base import ArtifactModel

ANSWERS_PER_QUESTION = 4


class Answer(ArtifactModel):
    """One answer option of a question."""

    text: str
    is_correct: bool = False


class Question(ArtifactModel):
    """A multiple-choice comprehension question attached to a post."""

    key: str
    post_key: str
    title: str
    question_text: str
    book_title: str
    chapter_title: str
    answers: list[Answer]
    type: Literal["multiple-choice"] = "multiple-choice"

    @field_validator("answers")
    @classmethod
    def _exactly_one_correct(cls, answers: list[Answer]) -> list[Answer]:
        if len(answers) != ANSWERS_PER_QUESTION:
            raise ValueError(
                f"expected {ANSWERS_PER_QUESTION} answers, got {len(answers)}"
            )
        correct = sum(1 for answer in answers if answer.is_correct)
        if correct != 1:
            raise ValueError(f"expected exactly one correct answer, got {correct}")
        return answers

    @property
    def correct_answer(self) -> Answer:
        return next(answer for answer in self.answers if answer.is_correct)


class QuestionBatch(ArtifactModel):
    """Questions from one generation run plus the posts they cover."""

    questions: list[Question] = Field(default_factory=list)
    generated_for: list[str] = Field(default_factory=list)
