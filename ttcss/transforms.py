"""
Output transforms applied to processed template literal contents.

A transform is a plain ``str -> str`` callable. The standard transform
re-escapes processor output so it stays a single valid template literal
when spliced back between the original backticks.
"""

from __future__ import annotations

from typing import Callable

TransformFunc = Callable[[str], str]


def pipe(*funcs: TransformFunc) -> TransformFunc:
    """Compose transforms left to right."""
    def piped(contents: str) -> str:
        for func in funcs:
            contents = func(contents)
        return contents
    return piped


def escape_backslash(contents: str) -> str:
    """Convert each occurrence of \\ with \\\\."""
    return contents.replace("\\", "\\\\")


def make_output_escaper(delimiter: str = "`", placeholder_open: str = "${") -> TransformFunc:
    """
    Build an escaper for a quoting construct with the given delimiter and
    placeholder-opening sequence.

    Backslash escaping comes first so escape sequences added by the later
    passes are not escaped again.
    """
    if len(delimiter) != 1:
        raise ValueError(f"Delimiter must be a single character, got {delimiter!r}")
    if not placeholder_open:
        raise ValueError("Placeholder-opening sequence must not be empty")

    def escape_delimiter(contents: str) -> str:
        return contents.replace(delimiter, "\\" + delimiter)

    def escape_placeholder_opening(contents: str) -> str:
        return contents.replace(placeholder_open, "\\" + placeholder_open)

    return pipe(escape_backslash, escape_delimiter, escape_placeholder_opening)


standard_output_transform: TransformFunc = make_output_escaper()


__all__ = [
    "TransformFunc",
    "pipe",
    "escape_backslash",
    "make_output_escaper",
    "standard_output_transform",
]
