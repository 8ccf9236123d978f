"""Tests for parse/source.py module."""

from __future__ import annotations

from pathlib import Path

import pytest

from convexgen.core.errors import ErrorCode, ParseError
from convexgen.parse.source import read_source, strip_comments


class TestStripComments:
    """Comment removal."""

    def test_line_and_block_comments_removed(self) -> None:
        text = "a // one\n/* two */b\n"

        assert strip_comments(text) == "a \nb\n"

    def test_line_breaks_preserved(self) -> None:
        """Multi-line block comments keep their newlines."""
        text = "x\n/**\n * defineSchema({})\n */\ny\n"

        result = strip_comments(text)

        assert result.count("\n") == text.count("\n")
        assert "defineSchema" not in result

    def test_unterminated_block_comment_runs_to_end(self) -> None:
        assert strip_comments("keep /* lost\nforever") == "keep \n"

    @pytest.mark.parametrize(
        "text",
        [
            'const include = "src/*.ts";\n',
            "const url = 'https://convex.dev';\n",
            "const glob = `packages/**/*.ts`;\n",
            'const escaped = "a\\"/*b";\n',
        ],
    )
    def test_comment_markers_inside_strings_are_kept(self, text: str) -> None:
        """Comment markers inside string and template literals open no comment."""
        assert strip_comments(text) == text

    def test_comment_after_string_still_removed(self) -> None:
        text = 'const a = "x"; // note\n'

        assert strip_comments(text) == 'const a = "x"; \n'


class TestReadSource:
    """File reading."""

    def test_reads_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / "a.ts"
        path.write_text("export {};\n")

        assert read_source(path) == b"export {};\n"

    def test_missing_file_raises_parse_error(self, tmp_path: Path) -> None:
        with pytest.raises(ParseError) as exc_info:
            read_source(tmp_path / "missing.ts")

        assert exc_info.value.code is ErrorCode.PARSE_FILE_UNREADABLE
        assert exc_info.value.details["path"] == str(tmp_path / "missing.ts")

    def test_non_utf8_file_raises_parse_error(self, tmp_path: Path) -> None:
        """Latin-1 bytes are reported as unreadable instead of failing later."""
        path = tmp_path / "labels.ts"
        path.write_bytes('export const name = "café";\n'.encode("latin-1"))

        with pytest.raises(ParseError) as exc_info:
            read_source(path)

        assert exc_info.value.code is ErrorCode.PARSE_FILE_UNREADABLE
        assert "UTF-8" in exc_info.value.details["reason"]
