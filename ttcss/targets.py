"""
Location of tagged template literal contents targeted for transformation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional

from .config import ProcessTagConfig
from .tree_sitter_support import TreeSitterDocument, create_document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransformTarget:
    """
    Template literal contents targeted for transformation.

    Attributes:
        start: Char index of the first character after the opening backtick
        end: Char index of the closing backtick
        literal_contents: code[start:end]
        tag: Tag name the literal was matched by
        tag_config: Config specifying how to transform the contents
    """
    start: int
    end: int
    literal_contents: str
    tag: str
    tag_config: ProcessTagConfig


def find_transform_targets(
    code: str,
    tag_map: Mapping[str, ProcessTagConfig],
    source_id: str = "",
    doc: Optional[TreeSitterDocument] = None,
) -> List[TransformTarget]:
    """
    Gather the contents of every tagged template literal whose tag is in tag_map.

    Only location and contents are collected here. Processing may be
    asynchronous and happens once all targets are gathered.

    Args:
        code: Module source
        tag_map: Tag name to config mapping; other tags are skipped
        source_id: Module id, used to pick the grammar when doc is not given
        doc: Already parsed document for code

    Returns:
        Targets in document order
    """
    if doc is None:
        doc = create_document(code, source_id)

    targets: List[TransformTarget] = []
    if not tag_map:
        return targets

    for node, capture_name in doc.query("tagged_templates"):
        if capture_name != "tagged_template":
            continue

        tag = doc.get_node_text(node.child_by_field_name("function"))
        tag_config = tag_map.get(tag)
        if tag_config is None:
            continue

        quasi = node.child_by_field_name("arguments")
        quasi_text = doc.get_node_text(quasi)
        if len(quasi_text) < 2 or not quasi_text.endswith("`"):
            # Error recovery can yield a template string without its closing backtick
            logger.warning("Skipping unterminated template literal tagged '%s' in %s", tag, source_id or "<code>")
            continue

        quasi_start, quasi_end = doc.get_node_range(quasi)
        # Drop exactly one backtick from each end
        start = quasi_start + 1
        end = quasi_end - 1

        targets.append(TransformTarget(
            start=start,
            end=end,
            literal_contents=code[start:end],
            tag=tag,
            tag_config=tag_config,
        ))

    targets.sort(key=lambda t: t.start)
    logger.debug("Found %d tagged template targets in %s", len(targets), source_id or "<code>")
    return targets


__all__ = ["TransformTarget", "find_transform_targets"]
