"""Text normalization for strings extracted from documentation pages."""

from __future__ import annotations

import re
import unicodedata


_UNICODE_ESCAPE_RE = re.compile(r"\\u([0-9a-fA-F]{4})")
_WHITESPACE_RE = re.compile(r"\s+")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+([.,;:!?)])(?=\s|$)")


def decode_unicode_escapes(text: str) -> str:
    """Replace literal `\\uXXXX` sequences with the character they name."""

    if "\\u" not in text:
        return text
    return _UNICODE_ESCAPE_RE.sub(lambda match: chr(int(match.group(1), 16)), text)


def strip_invisible(text: str) -> str:
    """Drop zero-width/format (Cf) and control (Cc) characters.

    Whitespace control characters (tab, newline, ...) are kept so that
    whitespace collapsing can still see word boundaries.
    """

    return "".join(
        char
        for char in text
        if char.isspace() or unicodedata.category(char) not in {"Cf", "Cc"}
    )


def collapse_whitespace(text: str) -> str:
    # `\s` covers U+00A0 for str patterns.
    return _WHITESPACE_RE.sub(" ", text).strip()


def clean_text(text: str | None) -> str:
    """Normalize one extracted string: decode escapes, strip invisibles, collapse spaces."""

    if not text:
        return ""
    return collapse_whitespace(strip_invisible(decode_unicode_escapes(text)))


def tidy_punctuation(text: str) -> str:
    """Remove the space that joining inline elements leaves before punctuation."""

    return _SPACE_BEFORE_PUNCT_RE.sub(r"\1", text)


_OPENERS = "<([{"
_CLOSERS = ">)]}"


def split_top_level(text: str, separator: str = ",") -> list[str]:
    """Split on `separator` outside of `<>`, `()`, `[]` and `{}` nesting.

    `Map<K, V> m, int x` splits into `Map<K, V> m` and `int x`.
    """

    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth = max(0, depth - 1)
        elif char == separator and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)

    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return [part for part in parts if part]


__all__ = [
    "clean_text",
    "collapse_whitespace",
    "decode_unicode_escapes",
    "split_top_level",
    "strip_invisible",
    "tidy_punctuation",
]
