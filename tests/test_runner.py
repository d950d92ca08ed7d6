import asyncio

import pytest

from ttcss.errors import ProcessorError
from ttcss.runner import build_process_options, make_transform_ranges
from ttcss.targets import TransformTarget


def target(start, contents, config, tag="css"):
    return TransformTarget(start=start, end=start + len(contents), literal_contents=contents, tag=tag, tag_config=config)


def test_region_options_overlay_from_and_to():
    opts = build_process_options("mod.js", {"parser": "p"})
    assert opts == {"from": "mod.js", "to": "mod.js", "parser": "p"}


@pytest.mark.asyncio
async def test_one_edit_per_target_with_escaped_output(make_processor, make_tag_config):
    processor = make_processor()
    config = make_tag_config("plugin", options={"syntax": "scss"})
    targets = [target(4, "a`b", config), target(20, "${x}", config)]

    ranges = await make_transform_ranges(targets, "mod.js", processor)

    assert [(e.start, e.end, e.replacement) for e in ranges.edits] == [
        (4, 7, "a\\`b"),
        (20, 24, "\\${x}"),
    ]
    assert processor.calls[0] == ("a`b", ["plugin"], {"from": "mod.js", "to": "mod.js", "syntax": "scss"})
    assert ranges.dependencies == []


@pytest.mark.asyncio
async def test_transforms_apply_left_to_right(make_processor, make_tag_config):
    config = make_tag_config(transforms=(lambda s: s + "1", lambda s: s + "2"))
    ranges = await make_transform_ranges([target(0, "x", config)], "m.js", make_processor())
    assert ranges.edits[0].replacement == "x12"


@pytest.mark.asyncio
async def test_no_transforms_leaves_output_raw(make_processor, make_tag_config):
    config = make_tag_config(transforms=())
    ranges = await make_transform_ranges([target(0, "`${a}`", config)], "m.js", make_processor())
    assert ranges.edits[0].replacement == "`${a}`"


@pytest.mark.asyncio
async def test_dependencies_are_deduplicated_across_targets(make_processor, make_tag_config):
    processor = make_processor(messages=[
        {"type": "dependency", "file": "/a.css"},
        {"type": "dir-dependency", "dir": "/theme"},
        {"type": "warning", "text": "x"},
    ])
    config = make_tag_config()
    targets = [target(0, "a", config), target(10, "b", config)]

    ranges = await make_transform_ranges(targets, "m.js", processor)
    assert ranges.dependencies == ["/a.css", "/theme"]


@pytest.mark.asyncio
async def test_targets_are_processed_concurrently(make_processor, make_tag_config):
    processor = make_processor(delay=0.01)
    config = make_tag_config()
    targets = [target(i * 10, str(i), config) for i in range(5)]

    ranges = await make_transform_ranges(targets, "m.js", processor)

    assert processor.max_in_flight == 5
    assert [e.replacement for e in ranges.edits] == ["0", "1", "2", "3", "4"]


@pytest.mark.asyncio
async def test_processor_failure_is_fatal_and_chained(failing_processor, make_tag_config):
    targets = [target(3, "bad", make_tag_config(), tag="scss")]

    with pytest.raises(ProcessorError) as exc_info:
        await make_transform_ranges(targets, "m.js", failing_processor)

    err = exc_info.value
    assert isinstance(err.__cause__, RuntimeError)
    assert err.source_id == "m.js" and err.tag == "scss" and err.start == 3


@pytest.mark.asyncio
async def test_no_targets(make_processor):
    ranges = await make_transform_ranges([], "m.js", make_processor())
    assert ranges.edits == [] and ranges.dependencies == []


@pytest.mark.asyncio
async def test_failure_cancels_sibling_processor_calls(make_tag_config):
    cancelled = []

    class SlowUnlessBad:
        async def process(self, css, plugins, options):
            if css == "bad":
                raise RuntimeError("bad input")
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.append(css)
                raise

    config = make_tag_config()
    targets = [target(0, "slow", config), target(10, "bad", config)]

    with pytest.raises(ProcessorError):
        await make_transform_ranges(targets, "m.js", SlowUnlessBad())

    for _ in range(3):
        await asyncio.sleep(0)
    assert cancelled == ["slow"]
