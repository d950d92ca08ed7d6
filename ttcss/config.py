"""
Tag configuration: user options for tag sets and their resolution into a
lookup from tag name to the processor config and output transforms used
for that tag.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Literal, Mapping, Optional, Sequence, Tuple, Union

from .errors import DuplicateTagError, TagConfigError
from .transforms import TransformFunc, standard_output_transform
from .utils import maybe_await

logger = logging.getLogger(__name__)

# Processor options honoured from user config. from/to/map are always set by the runner.
ACCEPTED_OPTIONS: Tuple[str, ...] = ("parser", "stringifier", "syntax")

ConfigSource = Literal["inline", "discovered"]


def pick_options(options: Mapping[str, Any]) -> Dict[str, Any]:
    """Keep only the recognized processor options."""
    return {key: options[key] for key in ACCEPTED_OPTIONS if key in options}


@dataclass
class ProcessorConfig:
    """
    Processor config object. Mirrors what a config file declares.
    Unrecognized options (including from, to and map) are dropped.
    """
    plugins: List[Any] = field(default_factory=list)
    options: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(d: Optional[Mapping[str, Any]]) -> ProcessorConfig:
        if d is None:
            return ProcessorConfig()
        if not isinstance(d, Mapping):
            raise TypeError(f"Processor config must be a mapping, got {type(d).__name__}")
        if not d:
            return ProcessorConfig()

        plugins = d.get("plugins")
        if plugins is None:
            plugins = []
        elif not isinstance(plugins, (list, tuple)):
            raise TypeError(f"Processor plugins must be a list, got {type(plugins).__name__}")

        return ProcessorConfig(plugins=list(plugins), options=pick_options(d))


@dataclass(frozen=True)
class ResolvedProcessorConfig:
    """Processor options and plugins for one tag set, plus where they came from."""
    options: Mapping[str, Any]
    plugins: Tuple[Any, ...]
    source: ConfigSource = "inline"


@dataclass(frozen=True)
class ProcessTagConfig:
    """How to transform the contents of one tagged template literal."""
    processor_config: ResolvedProcessorConfig
    output_transforms: Tuple[TransformFunc, ...]


@dataclass
class TagSetOptions:
    """
    Options for one set of tags.

    Attributes:
        tags: Tagged template literal names whose contents are processed
        processor: Inline processor config. When absent, a config is discovered
        output_transforms: Transforms applied after the processor, in order.
            None means the standard escaper; an empty list means no transforms
        include: Source id patterns to process
        exclude: Source id patterns to skip
    """
    tags: List[str]
    processor: Optional[Union[ProcessorConfig, Mapping[str, Any]]] = None
    output_transforms: Optional[List[TransformFunc]] = None
    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> TagSetOptions:
        tags = d.get("tags")
        if not isinstance(tags, (list, tuple)) or not all(isinstance(t, str) for t in tags):
            raise TagConfigError(f"Tag set must list tag names as strings, got {tags!r}", None)

        processor = d.get("processor", d.get("postcss"))
        transforms = d.get("output_transforms", d.get("outputTransforms"))

        return TagSetOptions(
            tags=list(tags),
            processor=processor,
            output_transforms=list(transforms) if transforms is not None else None,
            include=_as_list(d.get("include")),
            exclude=_as_list(d.get("exclude")),
        )


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


Options = Union[TagSetOptions, Mapping[str, Any]]
DiscoverFunc = Callable[[], Any]


def normalize_options(options: Union[Options, Sequence[Options]]) -> List[TagSetOptions]:
    """Turn one-or-many options objects into a list of TagSetOptions."""
    if isinstance(options, (TagSetOptions, Mapping)):
        options = [options]

    result = []
    for item in options:
        if isinstance(item, TagSetOptions):
            result.append(item)
        elif isinstance(item, Mapping):
            result.append(TagSetOptions.from_dict(item))
        else:
            raise TagConfigError(f"Invalid tag set options: {item!r}", None)
    return result


async def resolve_processor_config(
    inline: Optional[Union[ProcessorConfig, Mapping[str, Any]]],
    discover: DiscoverFunc,
) -> ResolvedProcessorConfig:
    """
    Resolve the processor config for a tag set.

    An inline config wins. Otherwise the discovery collaborator is asked
    for one. Both results go through the same option extraction.
    """
    if inline is not None:
        config = inline if isinstance(inline, ProcessorConfig) else ProcessorConfig.from_dict(inline)
        return ResolvedProcessorConfig(
            options=pick_options(config.options),
            plugins=tuple(config.plugins),
            source="inline",
        )

    # Discovery reads the file system; keep it off the event loop
    if inspect.iscoroutinefunction(discover):
        loaded = await discover()
    else:
        loaded = await maybe_await(await asyncio.to_thread(discover))
    config = loaded if isinstance(loaded, ProcessorConfig) else ProcessorConfig.from_dict(loaded)
    return ResolvedProcessorConfig(
        options=pick_options(config.options),
        plugins=tuple(config.plugins),
        source="discovered",
    )


async def make_tag_map(
    options: Union[Options, Sequence[Options]],
    discover: Optional[DiscoverFunc] = None,
) -> Dict[str, ProcessTagConfig]:
    """
    Create a map from tagged template literal name to the ProcessTagConfig
    used to transform that literal's contents.

    Raises:
        TagConfigError: If a tag set's processor config cannot be resolved
        DuplicateTagError: If a tag name is configured more than once
    """
    if discover is None:
        from .discovery import load_processor_config
        discover = load_processor_config

    tag_map: Dict[str, ProcessTagConfig] = {}

    for options_obj in normalize_options(options):
        try:
            processor_config = await resolve_processor_config(options_obj.processor, discover)
        except Exception as e:
            raise TagConfigError(
                f"Processor config missing for tag set {options_obj.tags}", options_obj.tags
            ) from e

        transforms = options_obj.output_transforms
        if transforms is None:
            transforms = [standard_output_transform]

        process_tag_config = ProcessTagConfig(
            processor_config=processor_config,
            output_transforms=tuple(transforms),
        )

        for tag in options_obj.tags:
            if tag in tag_map:
                raise DuplicateTagError(tag)
            tag_map[tag] = process_tag_config

        logger.debug(
            "Resolved %s processor config for tags %s (%d plugins)",
            processor_config.source, options_obj.tags, len(processor_config.plugins),
        )

    return tag_map


__all__ = [
    "ACCEPTED_OPTIONS",
    "ProcessorConfig",
    "ResolvedProcessorConfig",
    "ProcessTagConfig",
    "TagSetOptions",
    "normalize_options",
    "pick_options",
    "resolve_processor_config",
    "make_tag_map",
]
