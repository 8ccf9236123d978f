"""Tests for core/progress.py module."""

from __future__ import annotations

import pytest

from convexgen.core.progress import (
    _STYLES,
    is_console_suppressed,
    pluralize,
    spinner,
    suppress_console_logs,
)


class TestPluralize:
    @pytest.mark.parametrize(
        ("count", "singular", "plural", "expected"),
        [
            (1, "file", None, "1 file"),
            (0, "file", None, "0 files"),
            (3, "query", "queries", "3 queries"),
            (1, "query", "queries", "1 query"),
        ],
    )
    def test_forms(self, count: int, singular: str, plural: str | None, expected: str) -> None:
        assert pluralize(count, singular, plural) == expected


class TestSuppression:
    def test_flag_set_only_inside_block(self) -> None:
        assert not is_console_suppressed()

        with suppress_console_logs():
            assert is_console_suppressed()

        assert not is_console_suppressed()

    def test_flag_cleared_after_exception(self) -> None:
        with pytest.raises(RuntimeError), suppress_console_logs():
            raise RuntimeError("boom")

        assert not is_console_suppressed()


class TestSpinner:
    def test_non_tty_runs_body(self) -> None:
        """Under pytest stderr is not a TTY; the body still runs once."""
        calls = []

        with spinner("Parsing"):
            calls.append(1)

        assert calls == [1]

    def test_styles_cover_status_kinds(self) -> None:
        assert set(_STYLES) >= {"success", "error", "warning", "info", "none"}
