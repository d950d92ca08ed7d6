"""
Range-based text editing for template literal replacement.
Applies a set of non-overlapping character-range replacements in one pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from .errors import OverlappingEditsError


@dataclass(frozen=True)
class TextRange:
    """Represents a range in text by character positions."""
    start_char: int
    end_char: int

    def __post_init__(self):
        if self.start_char > self.end_char:
            raise ValueError(f"Invalid range: start_char ({self.start_char}) > end_char ({self.end_char})")

    @property
    def length(self) -> int:
        return self.end_char - self.start_char

    def overlaps(self, other: TextRange) -> bool:
        """
        Check if this range overlaps with another.

        Two insertions at the same position overlap, since their
        relative order would be undefined.
        """
        if self.length == 0 and other.length == 0:
            return self.start_char == other.start_char
        if self.length == 0:
            return other.start_char < self.start_char < other.end_char
        if other.length == 0:
            return self.start_char < other.start_char < self.end_char
        return not (self.end_char <= other.start_char or other.end_char <= self.start_char)


@dataclass(frozen=True)
class Edit:
    """A single replacement of a character range."""
    range: TextRange
    replacement: str

    @property
    def start(self) -> int:
        return self.range.start_char

    @property
    def end(self) -> int:
        return self.range.end_char


class RangeEditor:
    """
    Unicode-safe range editor working with character positions.

    Unlike a last-write-wins editor, overlapping edits are never resolved
    silently: apply_edits() raises OverlappingEditsError.
    """

    def __init__(self, original_text: str):
        self.original_text = original_text
        self.edits: List[Edit] = []

    def add_replacement(self, start_char: int, end_char: int, replacement: str) -> None:
        """Add a replacement operation."""
        self.edits.append(Edit(TextRange(start_char, end_char), replacement))

    def add_edit(self, edit: Edit) -> None:
        self.edits.append(edit)

    def validate_edits(self) -> List[str]:
        """Validate that all edits are within bounds."""
        errors = []

        for i, edit in enumerate(self.edits):
            if edit.start < 0:
                errors.append(f"Edit {i}: start_char ({edit.start}) is negative")
            if edit.end > len(self.original_text):
                errors.append(f"Edit {i}: end_char ({edit.end}) exceeds text length ({len(self.original_text)})")

        return errors

    def sorted_edits(self) -> List[Edit]:
        """
        Return edits ordered by start position.

        Raises:
            ValueError: If an edit is out of bounds
            OverlappingEditsError: If any two edits overlap
        """
        validation_errors = self.validate_edits()
        if validation_errors:
            raise ValueError(f"Edit validation failed: {'; '.join(validation_errors)}")

        ordered = sorted(self.edits, key=lambda e: (e.start, e.end))
        for prev, cur in zip(ordered, ordered[1:]):
            if prev.range.overlaps(cur.range):
                raise OverlappingEditsError(
                    f"Edits overlap: [{prev.start}, {prev.end}) and [{cur.start}, {cur.end})"
                )
        return ordered

    def apply_edits(self) -> str:
        """Apply all edits left to right and return the modified text."""
        if not self.edits:
            return self.original_text

        parts: List[str] = []
        cursor = 0
        for edit in self.sorted_edits():
            parts.append(self.original_text[cursor:edit.start])
            parts.append(edit.replacement)
            cursor = edit.end
        parts.append(self.original_text[cursor:])

        return "".join(parts)


def apply_ranges(text: str, ranges: Iterable[Tuple[int, int, str]]) -> str:
    """Splice (start, end, replacement) triples into text."""
    editor = RangeEditor(text)
    for start, end, replacement in ranges:
        editor.add_replacement(start, end, replacement)
    return editor.apply_edits()


__all__ = ["TextRange", "Edit", "RangeEditor", "apply_ranges"]
