"""
Pipeline entry point: process the contents of tagged template literals in
JavaScript and TypeScript modules and splice the results back.

    transformer = TaggedTemplateTransformer({
        "tags": ["css"],
        "processor": {"plugins": [autoprefix]},
        "include": ["src/**/*.js"],
    })
    output = await transformer.transform(code, "src/app.js")
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .config import DiscoverFunc, Options, ProcessTagConfig, make_tag_map, normalize_options
from .filtering import SourceFilter
from .processor import ContentProcessor, Processor
from .range_edits import RangeEditor
from .runner import make_transform_ranges
from .targets import find_transform_targets

logger = logging.getLogger(__name__)


@dataclass
class TransformOutput:
    """Transformed module code and the paths the host should watch."""
    code: str
    dependencies: List[str] = field(default_factory=list)
    map: Optional[str] = None


class TaggedTemplateTransformer:
    """
    Transforms tagged template literal contents of modules.

    Tag configuration is resolved on first use and reused for every module.
    Each call to transform() is independent of the others.
    """

    name = "tagged-template-postcss"

    def __init__(
        self,
        options: Union[Options, Sequence[Options]],
        processor: Optional[ContentProcessor] = None,
        discover: Optional[DiscoverFunc] = None,
        root: Optional[Path] = None,
    ):
        self.options = normalize_options(options)
        self.processor: ContentProcessor = processor if processor is not None else Processor()
        self.discover = discover
        # Include/exclude patterns of all tag sets apply to every module
        self.filter = SourceFilter.create(
            include=[pat for opts in self.options for pat in opts.include],
            exclude=[pat for opts in self.options for pat in opts.exclude],
            root=root if root is not None else Path.cwd(),
        )
        self._tag_map: Optional[Dict[str, ProcessTagConfig]] = None

    async def get_tag_map(self) -> Dict[str, ProcessTagConfig]:
        if self._tag_map is None:
            self._tag_map = await make_tag_map(self.options, self.discover)
        return self._tag_map

    async def transform(self, code: str, source_id: str) -> Optional[TransformOutput]:
        """
        Transform one module.

        Returns:
            None if the module is filtered out, otherwise the spliced code
            and its dependencies

        Raises:
            TagConfigError: If tag configuration cannot be resolved
            ProcessorError: If processing any literal fails
        """
        if not self.filter(source_id):
            return None

        tag_map = await self.get_tag_map()
        targets = find_transform_targets(code, tag_map, source_id)
        if not targets:
            return TransformOutput(code=code)

        transform_ranges = await make_transform_ranges(targets, source_id, self.processor)

        editor = RangeEditor(code)
        for edit in transform_ranges.edits:
            editor.add_edit(edit)

        logger.debug("Spliced %d literals into %s", len(transform_ranges.edits), source_id)
        return TransformOutput(
            code=editor.apply_edits(),
            dependencies=transform_ranges.dependencies,
        )

    def transform_sync(self, code: str, source_id: str) -> Optional[TransformOutput]:
        """Run transform() to completion in a new event loop."""
        return asyncio.run(self.transform(code, source_id))


async def transform_code(
    code: str,
    source_id: str,
    options: Union[Options, Sequence[Options]],
    processor: Optional[ContentProcessor] = None,
    discover: Optional[DiscoverFunc] = None,
) -> Optional[TransformOutput]:
    """One-shot form of TaggedTemplateTransformer.transform()."""
    transformer = TaggedTemplateTransformer(options, processor=processor, discover=discover)
    return await transformer.transform(code, source_id)


__all__ = ["TransformOutput", "TaggedTemplateTransformer", "transform_code"]
