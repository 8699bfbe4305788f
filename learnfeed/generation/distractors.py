"""Rule-based synthesis of wrong answers for multiple-choice questions."""

import random
import re

# Applied in table order; only the first letter's case is carried over.
ANTONYMS: dict[str, str] = {
    "increase": "decrease",
    "decrease": "increase",
    "high": "low",
    "low": "high",
    "good": "bad",
    "bad": "good",
    "more": "less",
    "less": "more",
    "always": "never",
    "never": "always",
    "should": "should not",
    "must": "must not",
    "effective": "ineffective",
    "successful": "unsuccessful",
    "improve": "worsen",
    "strength": "weakness",
}

_ANTONYM_PATTERNS: dict[str, re.Pattern[str]] = {
    word: re.compile(rf"\b{word}\b", re.IGNORECASE) for word in ANTONYMS
}
_DIGITS = re.compile(r"\d+")

QUALIFIER = " (partially)"
ALTERNATIVE_PREFIX_CHARS = 30
MIN_SHUFFLE_WORDS = 6


def _match_case(replacement: str, original: str) -> str:
    if original[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement


class DistractorSynthesizer:
    """Produces plausible wrong answers from a correct answer.

    Strategies run in order until enough distractors are collected:
    numeric perturbation, antonym substitution, a qualifier suffix,
    an interior word shuffle, and finally truncated "alternative
    interpretation" placeholders, so the result always has exactly
    ``count`` entries. Distractors are not de-duplicated against each
    other.

    Args:
        rng: Random source for numeric offsets and word shuffles.
        count: Number of distractors to return.
        max_offset: Largest absolute offset applied to numbers.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        count: int = 3,
        max_offset: int = 5,
    ) -> None:
        self._rng = rng or random.Random()
        self._count = count
        self._max_offset = max_offset

    def generate(self, correct_answer: str) -> list[str]:
        """Return exactly ``count`` wrong answers for correct_answer."""
        distractors: list[str] = []

        numeric = self._perturb_numbers(correct_answer)
        if numeric is not None:
            distractors.append(numeric)

        for substituted in self._substitute_antonyms(correct_answer):
            if len(distractors) >= self._count:
                break
            distractors.append(substituted)

        if len(distractors) < self._count:
            distractors.append(correct_answer + QUALIFIER)

        if len(distractors) < self._count:
            shuffled = self._shuffle_interior(correct_answer)
            if shuffled is not None:
                distractors.append(shuffled)

        while len(distractors) < self._count:
            distractors.append(
                f"{correct_answer[:ALTERNATIVE_PREFIX_CHARS]}... "
                f"[Alternative interpretation {len(distractors) + 1}]"
            )

        return distractors[: self._count]

    def _perturb_numbers(self, text: str) -> str | None:
        """Offset every run of digits; None if nothing changed."""
        if not _DIGITS.search(text):
            return None
        modified = _DIGITS.sub(
            lambda m: str(int(m.group()) + self._rng.randint(-self._max_offset, self._max_offset)),
            text,
        )
        return modified if modified != text else None

    def _substitute_antonyms(self, text: str) -> list[str]:
        """One variant per antonym table entry that changes the text."""
        variants: list[str] = []
        for word, opposite in ANTONYMS.items():
            pattern = _ANTONYM_PATTERNS[word]
            if not pattern.search(text):
                continue
            modified = pattern.sub(lambda m, o=opposite: _match_case(o, m.group()), text)
            if modified != text:
                variants.append(modified)
        return variants

    def _shuffle_interior(self, text: str) -> str | None:
        """Permute all but the first two and last two words."""
        words = text.split()
        if len(words) < MIN_SHUFFLE_WORDS:
            return None
        middle = words[2:-2]
        self._rng.shuffle(middle)
        return " ".join(words[:2] + middle + words[-2:])
