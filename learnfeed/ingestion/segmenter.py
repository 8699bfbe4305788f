"""Sentence segmentation for normalized chapter text."""

import re

SENTENCE_BOUNDARY = re.compile(r"[.!?]+\s+")


def split_sentences(text: str, min_chars: int = 20) -> list[str]:
    """Split chapter text into candidate sentences.

    Splits on runs of terminal punctuation followed by whitespace. The
    punctuation of every sentence but the last is consumed by the split.
    Fragments of ``min_chars`` characters or fewer are discarded.

    Args:
        text: Normalized chapter content.
        min_chars: Length a fragment must exceed to be kept.

    Returns:
        Sentences in source order.
    """
    sentences = (fragment.strip() for fragment in SENTENCE_BOUNDARY.split(text))
    return [s for s in sentences if len(s) > min_chars]
