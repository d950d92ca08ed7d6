import textwrap
from pathlib import Path

import pytest

from ttcss.discovery import find_config_file, import_object, load_processor_config
from ttcss.errors import DiscoveryError
from ttcss.transforms import escape_backslash, standard_output_transform


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
    return path


def test_loads_plugins_and_options(tmp_path):
    write(tmp_path / "ttcss.yaml", """
        parser: ttcss.transforms:escape_backslash
        to: ignored.css
        plugins:
          - ttcss.transforms:standard_output_transform
          - ttcss.transforms:make_output_escaper:
              delimiter: "'"
    """)

    config = load_processor_config(tmp_path)

    assert config.plugins[0] is standard_output_transform
    assert config.plugins[1]("'") == "\\'"
    assert config.options == {"parser": escape_backslash}


def test_config_found_in_parent_directory(tmp_path):
    cfg = write(tmp_path / ".ttcssrc.yml", "plugins: []\n")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    assert find_config_file(nested) == cfg.resolve()
    assert load_processor_config(nested).plugins == []


def test_missing_config_raises(tmp_path):
    with pytest.raises(DiscoveryError, match="No processor config found"):
        load_processor_config(tmp_path)


def test_non_mapping_yaml_raises(tmp_path):
    write(tmp_path / "ttcss.yaml", "- just\n- a list\n")
    with pytest.raises(DiscoveryError, match="mapping"):
        load_processor_config(tmp_path)


def test_invalid_yaml_raises(tmp_path):
    write(tmp_path / "ttcss.yaml", "plugins: [unclosed\n")
    with pytest.raises(DiscoveryError):
        load_processor_config(tmp_path)


def test_unimportable_plugin_raises(tmp_path):
    write(tmp_path / "ttcss.yaml", "plugins:\n  - no_such_module_xyz:plugin\n")
    with pytest.raises(DiscoveryError, match="Cannot import") as exc_info:
        load_processor_config(tmp_path)
    assert isinstance(exc_info.value.__cause__, ImportError)


def test_import_object_forms():
    assert import_object("ttcss.transforms:escape_backslash") is escape_backslash
    assert import_object("ttcss.transforms.escape_backslash") is escape_backslash
    with pytest.raises(DiscoveryError):
        import_object("nodots")
