from __future__ import annotations

"""Application config orchestration and YAML loading entrypoints."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from Mdq.config.index import IndexConfig, check_index, load_index
from Mdq.config.ingest import IngestConfig, check_ingest, load_ingest
from Mdq.config.interactive import InteractiveConfig, check_interactive, load_interactive
from Mdq.config.query import QueryConfig, check_query, load_query
from Mdq.config.runtime import RuntimeConfig, check_runtime, load_runtime

DEFAULT_CONFIG_PATH = Path(__file__).with_name("default.yml")
USER_CONFIG_PATH = Path("~/.config/mdq/config.yml")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application root configuration."""

    runtime: RuntimeConfig
    index: IndexConfig
    ingest: IngestConfig
    query: QueryConfig
    interactive: InteractiveConfig


def parse_config_dict(raw: Mapping[str, Any]) -> AppConfig:
    """Parse normalized mapping into AppConfig."""
    runtime = load_runtime(raw)
    index = load_index(raw)
    ingest = load_ingest(raw)
    query = load_query(raw)
    interactive = load_interactive(raw)

    check_runtime(runtime)
    check_index(index)
    check_ingest(ingest)
    check_query(query)
    check_interactive(interactive)

    return AppConfig(
        runtime=runtime,
        index=index,
        ingest=ingest,
        query=query,
        interactive=interactive,
    )


def load_config(
    config_path: Optional[Path] = None,
    *,
    overrides: Optional[Mapping[str, Any]] = None,
) -> AppConfig:
    """Load the packaged defaults merged with a user config file.

    Args:
        config_path: User config file. Defaults to `~/.config/mdq/config.yml`;
            a missing file at the default location means defaults only.
        overrides: Extra mapping merged last (command-line options).

    Raises:
        FileNotFoundError: If an explicitly given config file is missing.
    """
    if config_path is None:
        user_path = USER_CONFIG_PATH.expanduser()
        config_path = user_path if user_path.is_file() else None
    return load_config_with_defaults(config_path, overrides=overrides)


def load_config_with_defaults(
    config_path: Optional[Path],
    default_path: Path = DEFAULT_CONFIG_PATH,
    *,
    overrides: Optional[Mapping[str, Any]] = None,
) -> AppConfig:
    """Load config by merging defaults, an optional file and overrides."""
    merged = parse_yaml(default_path.read_text(encoding="utf-8"))
    if config_path is not None and Path(config_path) != default_path:
        override = parse_yaml(Path(config_path).expanduser().read_text(encoding="utf-8"))
        merged = merge_config_dicts(merged, override)
    if overrides:
        merged = merge_config_dicts(merged, overrides)
    return parse_config_dict(merged)


def parse_yaml(text: str) -> dict[str, Any]:
    """Parse raw YAML text into a mapping."""
    data = yaml.safe_load(text) or {}
    if not isinstance(data, Mapping):
        raise ValueError("Config root must be a mapping/object")
    return dict(data)


def merge_config_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge two config mappings."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], Mapping) and isinstance(value, Mapping):
            merged[key] = merge_config_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged
