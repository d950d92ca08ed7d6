"""
Default external processor for template literal contents.

Shaped after PostCSS: a list of plugins runs over a root produced by a
parser, the root is stringified back to text, and plugins report side
channel facts (such as file dependencies) as messages on the result.

Any object with a compatible ``process(css, plugins, options)`` method
may be used instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence

from .utils import maybe_await

logger = logging.getLogger(__name__)

# Message types that carry watch dependencies. context-dependency is the
# historic form of a directory dependency and stores the path in "file".
FILE_DEPENDENCY_TYPES = ("dependency", "context-dependency")
DIR_DEPENDENCY_TYPE = "dir-dependency"


@dataclass
class ProcessResult:
    """Outcome of processing one template literal's contents."""
    css: str = ""
    root: Any = None
    messages: List[Dict[str, Any]] = field(default_factory=list)
    options: Dict[str, Any] = field(default_factory=dict)

    def add_dependency(self, path: str, plugin: Optional[str] = None) -> None:
        self.messages.append({"type": "dependency", "file": path, "plugin": plugin})

    def add_dir_dependency(self, path: str, plugin: Optional[str] = None) -> None:
        self.messages.append({"type": DIR_DEPENDENCY_TYPE, "dir": path, "plugin": plugin})

    def dependencies(self) -> List[str]:
        return dependencies_from_messages(self.messages)


def dependencies_from_messages(messages: Sequence[Mapping[str, Any]]) -> List[str]:
    """File and directory paths reported through processor messages."""
    paths = []
    for message in messages:
        kind = message.get("type")
        if kind in FILE_DEPENDENCY_TYPES and message.get("file"):
            paths.append(message["file"])
        elif kind == DIR_DEPENDENCY_TYPE and message.get("dir"):
            paths.append(message["dir"])
    return paths


class ContentProcessor(Protocol):
    """What the transform runner needs from a processor."""

    def process(self, css: str, plugins: Sequence[Any], options: Mapping[str, Any]) -> Any:
        ...


def _identity(value: Any) -> Any:
    return value


def _resolve_codec(options: Mapping[str, Any]) -> tuple[Callable[[str], Any], Callable[[Any], str]]:
    """
    Parser and stringifier for a process call. A syntax object (with parse
    and stringify) is accepted for either option; explicit options win over
    the syntax option.
    """
    syntax = options.get("syntax")

    parser = options.get("parser") or syntax
    if parser is not None and hasattr(parser, "parse"):
        parser = parser.parse

    stringifier = options.get("stringifier") or syntax
    if stringifier is not None and hasattr(stringifier, "stringify"):
        stringifier = stringifier.stringify

    return parser or _identity, stringifier or str


class Processor:
    """
    Plugin pipeline over template literal contents.

    Each plugin is called as ``plugin(root, result)`` and may mutate the
    root in place or return a replacement. Coroutine plugins are awaited.
    """

    async def process(self, css: str, plugins: Sequence[Any], options: Mapping[str, Any]) -> ProcessResult:
        parser, stringifier = _resolve_codec(options)
        result = ProcessResult(options={"from": options.get("from"), "to": options.get("to")})

        root = parser(css)
        for plugin in plugins:
            returned = await maybe_await(plugin(root, result))
            if returned is not None:
                root = returned

        result.root = root
        result.css = stringifier(root)
        logger.debug("Processed %s with %d plugins", options.get("from"), len(plugins))
        return result


__all__ = [
    "FILE_DEPENDENCY_TYPES",
    "DIR_DEPENDENCY_TYPE",
    "ProcessResult",
    "dependencies_from_messages",
    "ContentProcessor",
    "Processor",
]
