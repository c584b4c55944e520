from __future__ import annotations

"""Public configuration API for mdq."""

from Mdq.config.app import (
    DEFAULT_CONFIG_PATH,
    USER_CONFIG_PATH,
    AppConfig,
    load_config,
    load_config_with_defaults,
    merge_config_dicts,
    parse_config_dict,
)
from Mdq.config.index import IndexConfig
from Mdq.config.ingest import IngestConfig
from Mdq.config.interactive import InteractiveConfig
from Mdq.config.query import QueryConfig
from Mdq.config.runtime import RuntimeConfig

__all__ = [
    "RuntimeConfig",
    "IndexConfig",
    "IngestConfig",
    "QueryConfig",
    "InteractiveConfig",
    "AppConfig",
    "DEFAULT_CONFIG_PATH",
    "USER_CONFIG_PATH",
    "load_config",
    "load_config_with_defaults",
    "merge_config_dicts",
    "parse_config_dict",
]
