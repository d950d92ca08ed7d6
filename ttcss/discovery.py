"""
Discovery of a processor config file.

Used for tag sets that do not carry an inline processor config. The nearest
config file found walking up from the search directory is loaded:

    # ttcss.yaml
    parser: my_pkg.css:parse
    plugins:
      - my_pkg.plugins:autoprefix
      - my_pkg.plugins:make_minifier:
          level: 2
"""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .config import ACCEPTED_OPTIONS, ProcessorConfig
from .errors import DiscoveryError

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("ttcss.yaml", ".ttcssrc.yaml", ".ttcssrc.yml")

_yaml = YAML(typ="safe")


def find_config_file(search_from: Path) -> Optional[Path]:
    """Nearest config file in search_from or any of its parents."""
    start = search_from.resolve()
    for directory in (start, *start.parents):
        for name in CONFIG_FILENAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    return None


def _read_yaml_map(path: Path) -> dict:
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise DiscoveryError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise DiscoveryError(f"YAML must be a mapping: {path}")
    return raw


def import_object(ref: str) -> Any:
    """Import ``module.path:attr`` (or ``module.path.attr``)."""
    if ":" in ref:
        module_name, _, attr_path = ref.partition(":")
    else:
        module_name, _, attr_path = ref.rpartition(".")
    if not module_name or not attr_path:
        raise DiscoveryError(f"Invalid import reference '{ref}'")

    try:
        obj = importlib.import_module(module_name)
        for attr in attr_path.split("."):
            obj = getattr(obj, attr)
    except (ImportError, AttributeError) as e:
        raise DiscoveryError(f"Cannot import '{ref}': {e}") from e
    return obj


def _load_plugin(entry: Any, path: Path) -> Any:
    if isinstance(entry, str):
        return import_object(entry)

    # {ref: options} calls the referenced factory with the options mapping
    if isinstance(entry, dict) and len(entry) == 1:
        ref, plugin_options = next(iter(entry.items()))
        factory = import_object(ref)
        return factory(**(plugin_options or {}))

    raise DiscoveryError(f"Invalid plugin entry {entry!r} in {path}")


def load_config_file(path: Path) -> ProcessorConfig:
    raw = _read_yaml_map(path)

    plugin_entries = raw.get("plugins") or []
    if not isinstance(plugin_entries, list):
        raise DiscoveryError(f"'plugins' must be a list in {path}")
    plugins: List[Any] = [_load_plugin(entry, path) for entry in plugin_entries]

    options: Dict[str, Any] = {}
    for key in ACCEPTED_OPTIONS:
        if raw.get(key):
            options[key] = import_object(raw[key])

    logger.debug("Loaded processor config from %s (%d plugins)", path, len(plugins))
    return ProcessorConfig(plugins=plugins, options=options)


def load_processor_config(search_from: Optional[Path] = None) -> ProcessorConfig:
    """
    Discover and load the processor config.

    Raises:
        DiscoveryError: If no config file is found or it cannot be loaded
    """
    base = Path.cwd() if search_from is None else Path(search_from)
    path = find_config_file(base)
    if path is None:
        raise DiscoveryError(f"No processor config found from {base} (looked for {', '.join(CONFIG_FILENAMES)})")
    return load_config_file(path)


__all__ = [
    "CONFIG_FILENAMES",
    "find_config_file",
    "import_object",
    "load_config_file",
    "load_processor_config",
]
