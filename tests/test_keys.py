"""Tests for content-addressed key derivation."""

import hashlib
import re

from learnfeed.keys import KEY_LENGTH, post_key, question_key

HEX16 = re.compile(r"^[0-9a-f]{16}$")


class TestPostKey:
    def test_matches_sha256_prefix(self) -> None:
        expected = hashlib.sha256(b"Atomic Notes-ch1-0").hexdigest()[:16]
        assert post_key("Atomic Notes", "ch1", 0) == expected

    def test_format(self) -> None:
        key = post_key("Atomic Notes", "ch1", 7)
        assert len(key) == KEY_LENGTH
        assert HEX16.match(key)

    def test_deterministic(self) -> None:
        assert post_key("Book", "c", 3) == post_key("Book", "c", 3)

    def test_coordinates_change_key(self) -> None:
        keys = {
            post_key("Book", "c", 0),
            post_key("Book", "c", 1),
            post_key("Book", "d", 0),
            post_key("Other", "c", 0),
        }
        assert len(keys) == 4

    def test_unicode_titles(self) -> None:
        expected = hashlib.sha256("Café Stories-x-2".encode("utf-8")).hexdigest()[:16]
        assert post_key("Café Stories", "x", 2) == expected


class TestQuestionKey:
    def test_matches_sha256_prefix(self) -> None:
        pkey = post_key("Atomic Notes", "ch1", 0)
        expected = hashlib.sha256(f"{pkey}-question-1".encode()).hexdigest()[:16]
        assert question_key(pkey, 1) == expected

    def test_distinct_per_index_and_from_post(self) -> None:
        pkey = post_key("Atomic Notes", "ch1", 0)
        keys = {pkey, question_key(pkey, 0), question_key(pkey, 1)}
        assert len(keys) == 3
        assert all(HEX16.match(k) for k in keys)
