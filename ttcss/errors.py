"""
Exceptions raised by the tagged template pipeline.

Expected failures that the user can fix (bad configuration, a processor
rejecting template contents) inherit from TaggedTemplateError.

Internal invariant violations do NOT inherit from it and propagate
with full tracebacks.
"""

from __future__ import annotations

from typing import Optional, Sequence


class TaggedTemplateError(Exception):
    """Base class for all user-facing errors."""
    pass


class TagConfigError(TaggedTemplateError):
    """Configuration for a tag set could not be resolved."""

    def __init__(self, message: str, tags: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.tags = list(tags) if tags is not None else []


class DuplicateTagError(TagConfigError):
    """The same tag name is configured more than once."""

    def __init__(self, tag: str):
        super().__init__(f"Processor config already defined for tagged template literal {tag}", [tag])
        self.tag = tag


class DiscoveryError(TaggedTemplateError):
    """No usable processor config file could be loaded."""
    pass


class ProcessorError(TaggedTemplateError):
    """The external processor failed on a template literal."""

    def __init__(self, source_id: str, tag: str, start: int):
        super().__init__(f"Failed to process tagged template literal '{tag}' at offset {start} in {source_id}")
        self.source_id = source_id
        self.tag = tag
        self.start = start


class OverlappingEditsError(ValueError):
    """Two replacement ranges overlap. Indicates a bug in region location."""
    pass


__all__ = [
    "TaggedTemplateError",
    "TagConfigError",
    "DuplicateTagError",
    "DiscoveryError",
    "ProcessorError",
    "OverlappingEditsError",
]
