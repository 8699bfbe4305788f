"""Markup normalization for chapter documents."""

import re

from bs4 import BeautifulSoup

_WHITESPACE = re.compile(r"\s+")


def normalize_markup(markup: str) -> str:
    """Reduce an (X)HTML chapter document to a single line of plain text.

    Script and style elements are removed together with their content,
    every other tag becomes a single space, entities are decoded, and
    whitespace runs (including non-breaking spaces) collapse to one space.

    Args:
        markup: Raw chapter markup.

    Returns:
        Normalized plain text, trimmed.
    """
    if not markup.strip():
        return ""

    soup = BeautifulSoup(markup, "lxml")

    # Remove script and style elements
    for tag in soup(["script", "style"]):
        tag.decompose()

    text = soup.get_text(separator=" ")
    return _WHITESPACE.sub(" ", text).strip()
