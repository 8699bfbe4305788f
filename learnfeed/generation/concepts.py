"""Heuristic concept extraction from post content."""

import re
from collections.abc import Iterable

from learnfeed.config import DEFAULT_IMPORTANCE_MARKERS

_SENTENCE_SPLIT = re.compile(r"[.!?]+")

FALLBACK_SENTENCES = 3


def extract_key_concepts(
    text: str, markers: Iterable[str] = DEFAULT_IMPORTANCE_MARKERS
) -> list[str]:
    """Select sentences likely to carry a testable claim.

    A sentence qualifies when its lower-cased text contains any
    importance marker as a substring. When no sentence qualifies, the
    first three sentences are returned instead.

    Args:
        text: Post content.
        markers: Lower-case importance markers.

    Returns:
        Candidate concept sentences in source order.
    """
    marker_set = {marker.lower() for marker in markers}
    sentences = [s.strip() for s in _SENTENCE_SPLIT.split(text)]
    sentences = [s for s in sentences if s]

    concepts = [
        sentence
        for sentence in sentences
        if any(marker in sentence.lower() for marker in marker_set)
    ]
    return concepts or sentences[:FALLBACK_SENTENCES]
