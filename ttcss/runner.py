"""
Transformation of located template literal contents.

Every target is processed independently and concurrently. Results are
joined by index once all targets are done, so no state is shared between
in-flight transformations.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Sequence

from .errors import ProcessorError
from .processor import ContentProcessor, dependencies_from_messages
from .range_edits import Edit, TextRange
from .targets import TransformTarget
from .transforms import pipe
from .utils import maybe_await

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TargetResult:
    """Replacement for one target plus the dependencies its processing reported."""
    edit: Edit
    dependencies: FrozenSet[str]


@dataclass(frozen=True)
class TransformRanges:
    """Replacement edits for all targets and the union of their dependencies."""
    edits: List[Edit]
    dependencies: List[str]


def build_process_options(source_id: str, options: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay a target's processor options onto the from/to base."""
    process_options: Dict[str, Any] = {"from": source_id, "to": source_id}
    process_options.update(options)
    return process_options


async def transform_target(
    target: TransformTarget,
    source_id: str,
    processor: ContentProcessor,
) -> TargetResult:
    """
    Process one target's contents and apply its output transforms.

    Raises:
        ProcessorError: If the processor fails; the original error is chained
    """
    processor_config = target.tag_config.processor_config
    process_options = build_process_options(source_id, dict(processor_config.options))

    try:
        result = await maybe_await(
            processor.process(target.literal_contents, list(processor_config.plugins), process_options)
        )
    except Exception as e:
        raise ProcessorError(source_id, target.tag, target.start) from e

    replacement = pipe(*target.tag_config.output_transforms)(result.css)

    # File and directory dependencies are both watch paths for the host
    dependencies = frozenset(dependencies_from_messages(getattr(result, "messages", None) or []))

    logger.debug(
        "Transformed '%s' literal [%d, %d) in %s: %d dependencies",
        target.tag, target.start, target.end, source_id, len(dependencies),
    )
    return TargetResult(
        edit=Edit(TextRange(target.start, target.end), replacement),
        dependencies=dependencies,
    )


async def make_transform_ranges(
    targets: Sequence[TransformTarget],
    source_id: str,
    processor: ContentProcessor,
) -> TransformRanges:
    """
    Transform all targets concurrently.

    Any failure fails the whole call; no partial result is returned.

    Args:
        targets: Targets located in the module code
        source_id: Module id, passed to the processor as from/to
        processor: External processor

    Returns:
        One edit per target, in target order, and the sorted, deduplicated
        dependency paths
    """
    tasks = [asyncio.ensure_future(transform_target(target, source_id, processor)) for target in targets]
    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        # The invocation has failed; stop sibling processor calls
        for task in tasks:
            task.cancel()
        raise

    dependencies = set()
    for target_result in results:
        dependencies.update(target_result.dependencies)

    return TransformRanges(
        edits=[target_result.edit for target_result in results],
        dependencies=sorted(dependencies),
    )


__all__ = [
    "TargetResult",
    "TransformRanges",
    "build_process_options",
    "transform_target",
    "make_transform_ranges",
]
