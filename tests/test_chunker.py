"""
Tests for paragraph-aware chunking.

Tests cover:
- Empty and short inputs
- Greedy paragraph packing
- Hard splitting of oversize paragraphs
- Size bound and reconstruction properties
"""

import re

import pytest

from summarization.chunker import chunk_text


def _paragraphs(text):
    return re.split(r"\n{2,}", text)


class TestChunkTextBasics:
    """Inputs that fit in a single chunk."""

    def test_empty_text_gives_no_chunks(self):
        assert chunk_text("") == []

    def test_short_text_is_one_chunk(self):
        assert chunk_text("A.\n\nB.", 6000) == ["A.\n\nB."]

    def test_text_exactly_target_size_is_one_chunk(self):
        text = "x" * 6000
        assert chunk_text(text, 6000) == [text]

    def test_runs_of_newlines_become_single_separator(self):
        assert chunk_text("A\n\n\n\nB", 6000) == ["A\n\nB"]

    def test_single_newlines_stay_inside_paragraph(self):
        assert chunk_text("line one\nline two", 6000) == ["line one\nline two"]

    def test_non_positive_target_size_rejected(self):
        with pytest.raises(ValueError):
            chunk_text("some text", 0)


class TestChunkTextPacking:
    """Greedy accumulation of paragraphs."""

    def test_paragraphs_packed_until_limit(self):
        a, b, c = "a" * 3000, "b" * 2000, "c" * 2000
        chunks = chunk_text(f"{a}\n\n{b}\n\n{c}", 6000)
        assert chunks == [f"{a}\n\n{b}", c]

    def test_separator_counts_towards_limit(self):
        # 5 + 2 + 4 = 11 > 10
        chunks = chunk_text("aaaaa\n\nbbbb", 10)
        assert chunks == ["aaaaa", "bbbb"]

    def test_separator_fits_exactly(self):
        # 4 + 2 + 4 = 10
        assert chunk_text("aaaa\n\nbbbb", 10) == ["aaaa\n\nbbbb"]

    def test_order_is_preserved(self):
        paragraphs = [f"paragraph {i:02d}" for i in range(30)]
        chunks = chunk_text("\n\n".join(paragraphs), 40)
        rebuilt = [p for chunk in chunks for p in chunk.split("\n\n")]
        assert rebuilt == paragraphs


class TestChunkTextHardSplit:
    """Paragraphs larger than the target size."""

    def test_two_oversize_paragraphs(self):
        text = "a" * 7000 + "\n\n" + "b" * 7000
        chunks = chunk_text(text, 6000)
        assert [len(c) for c in chunks] == [6000, 1000, 6000, 1000]
        assert chunks[0] == "a" * 6000
        assert chunks[1] == "a" * 1000
        assert chunks[2] == "b" * 6000
        assert chunks[3] == "b" * 1000

    def test_buffer_flushed_before_hard_split(self):
        text = "x" * 100 + "\n\n" + "y" * 13000
        chunks = chunk_text(text, 6000)
        assert chunks == ["x" * 100, "y" * 6000, "y" * 6000, "y" * 1000]

    def test_buffer_restarts_after_hard_split(self):
        text = "y" * 6500 + "\n\n" + "short one" + "\n\n" + "short two"
        chunks = chunk_text(text, 6000)
        assert chunks == ["y" * 6000, "y" * 500, "short one\n\nshort two"]


class TestChunkTextProperties:
    """Bounds and reconstruction over a mixed document."""

    @pytest.fixture
    def mixed_text(self):
        sizes = [120, 4000, 900, 7500, 50, 2999, 3001, 12001, 10, 5999]
        return "\n\n".join(chr(ord("a") + i) * size for i, size in enumerate(sizes))

    def test_no_chunk_exceeds_target(self, mixed_text):
        assert all(len(c) <= 3000 for c in chunk_text(mixed_text, 3000))

    def test_hard_split_slices_are_full_size_except_last(self, mixed_text):
        chunks = chunk_text(mixed_text, 3000)
        d_slices = [c for c in chunks if c.startswith("d")]
        assert [len(c) for c in d_slices] == [3000, 3000, 1500]

    def test_chunk_count(self, mixed_text):
        assert len(chunk_text(mixed_text, 3000)) == 19

    def test_content_preserved_without_hard_splits(self):
        paragraphs = ["alpha " * 40, "beta " * 30, "gamma " * 50, "delta " * 10]
        text = "\n\n".join(paragraphs)
        chunks = chunk_text(text, 400)
        assert "\n\n".join(chunks) == text

    def test_content_preserved_with_hard_splits(self, mixed_text):
        chunks = chunk_text(mixed_text, 3000)
        assert "".join(chunks).replace("\n\n", "") == "".join(_paragraphs(mixed_text))
