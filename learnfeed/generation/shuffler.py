"""Answer position randomization."""

import random
from collections.abc import Sequence

from learnfeed.models.question import Answer


def shuffle_answers(
    answers: Sequence[Answer], rng: random.Random | None = None
) -> list[Answer]:
    """Return a Fisher-Yates permutation of the answers.

    The input is left untouched; the multiset of answers is preserved.
    """
    rng = rng or random.Random()
    shuffled = list(answers)
    for j in range(len(shuffled) - 1, 0, -1):
        k = rng.randrange(j + 1)
        shuffled[j], shuffled[k] = shuffled[k], shuffled[j]
    return shuffled
