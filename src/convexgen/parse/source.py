"""Reading TypeScript sources as text."""

from __future__ import annotations

from pathlib import Path

from convexgen.core.errors import ParseError

_QUOTES = frozenset("'\"`")


def read_source(path: Path) -> bytes:
    """Read a source file.

    The bytes are returned as read, but they must decode as UTF-8 so that
    node text taken from the parse tree can be decoded later.

    Raises:
        ParseError: If the file cannot be read or is not valid UTF-8.
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ParseError.file_unreadable(str(path), e.strerror or str(e)) from e
    try:
        data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError.file_unreadable(
            str(path), f"not valid UTF-8 (byte {e.start}: {e.reason})"
        ) from e
    return data


def _string_end(text: str, start: int) -> int:
    """Index just past the string literal opening at `start`.

    Quoted strings also end at a line break; template literals do not.
    """
    quote = text[start]
    i = start + 1
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == "\n" and quote != "`":
            return i
        i += 1
    return n


def strip_comments(text: str) -> str:
    """Remove `/* ... */` and `// ...` comments, keeping line breaks.

    Text inside comments never matches declarations, so JSDoc examples such as
    `defineSchema({ ... })` are not mistaken for the real thing. String and
    template literals are copied unchanged, so `"src/*.ts"` opens no comment.
    """
    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        if text[i] in _QUOTES:
            end = _string_end(text, i)
            out.append(text[i:end])
            i = end
            continue
        if text.startswith("/*", i):
            end = text.find("*/", i + 2)
            stop = n if end == -1 else end
            out.append("\n" * text.count("\n", i, stop))
            i = n if end == -1 else end + 2
            continue
        if text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
            continue
        out.append(text[i])
        i += 1
    return "".join(out)
