from __future__ import annotations

"""Index domain configuration."""

from dataclasses import dataclass
from typing import Any, Mapping

from Mdq.config.common import get_section, read_str


@dataclass(frozen=True, slots=True)
class IndexConfig:
    """Index database settings."""

    db_path: str


def load_index(raw: Mapping[str, Any]) -> IndexConfig:
    section = get_section(raw, "index")
    return IndexConfig(db_path=read_str(section, "index", "db_path"))


def check_index(config: IndexConfig) -> None:
    if not config.db_path.strip():
        raise ValueError("index.db_path must not be empty")
