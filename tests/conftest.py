import asyncio
from typing import Any, Dict, List, Mapping, Sequence

import pytest

from ttcss.config import ProcessTagConfig, ResolvedProcessorConfig
from ttcss.processor import ProcessResult
from ttcss.transforms import standard_output_transform


class RecordingProcessor:
    """Identity processor that records every call and can report dependencies."""

    def __init__(self, messages: Sequence[Dict[str, Any]] = (), delay: float = 0.0):
        self.calls: List[tuple] = []
        self.messages = list(messages)
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0

    async def process(self, css: str, plugins: Sequence[Any], options: Mapping[str, Any]) -> ProcessResult:
        self.calls.append((css, list(plugins), dict(options)))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        return ProcessResult(css=css, messages=list(self.messages))


class FailingProcessor:

    def process(self, css, plugins, options):
        raise RuntimeError(f"cannot parse {css!r}")


@pytest.fixture
def recording_processor() -> RecordingProcessor:
    return RecordingProcessor()


def tag_config(*plugins, options=None, transforms=(standard_output_transform,)) -> ProcessTagConfig:
    """ProcessTagConfig built without going through resolution."""
    return ProcessTagConfig(
        processor_config=ResolvedProcessorConfig(options=dict(options or {}), plugins=tuple(plugins)),
        output_transforms=tuple(transforms),
    )


@pytest.fixture
def css_tag_map() -> Dict[str, ProcessTagConfig]:
    return {"css": tag_config()}


def no_discovery():
    raise AssertionError("discovery must not be called when an inline config is given")


@pytest.fixture
def make_tag_config():
    return tag_config


@pytest.fixture
def make_processor():
    return RecordingProcessor


@pytest.fixture
def failing_processor() -> FailingProcessor:
    return FailingProcessor()


@pytest.fixture
def forbid_discovery():
    return no_discovery
