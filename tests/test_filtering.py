from pathlib import Path

from ttcss.filtering import SourceFilter


def test_no_patterns_includes_everything():
    f = SourceFilter.create()
    assert f("src/a.js")
    assert f("/abs/b.ts")


def test_include_and_exclude():
    f = SourceFilter.create(include=["src/**/*.js"], exclude=["**/*.test.js"])
    assert f("src/a.js")
    assert f("src/deep/b.js")
    assert not f("src/a.test.js")
    assert not f("lib/a.js")
    assert not f("src/a.ts")


def test_exclude_only():
    f = SourceFilter.create(exclude=["node_modules/"])
    assert f("src/a.js")
    assert not f("node_modules/lit/index.js")


def test_absolute_ids_are_matched_relative_to_root(tmp_path):
    f = SourceFilter.create(include=["src/*.js"], root=tmp_path)
    assert f(str(tmp_path / "src" / "a.js"))
    assert not f(str(tmp_path / "other" / "a.js"))
    assert not f(str(Path("/elsewhere") / "src" / "a.js"))


def test_virtual_modules_are_rejected():
    f = SourceFilter.create()
    assert not f("\0virtual:styles.js")
