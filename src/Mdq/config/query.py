from __future__ import annotations

"""Query domain configuration."""

from dataclasses import dataclass
from typing import Any, Mapping

from Mdq.config.common import get_section, read_int


@dataclass(frozen=True, slots=True)
class QueryConfig:
    """Query settings.

    Attributes:
        limit: Hits returned when the command line sets no limit.
    """

    limit: int


def load_query(raw: Mapping[str, Any]) -> QueryConfig:
    """Load query domain config from raw mapping."""
    section = get_section(raw, "query")
    return QueryConfig(limit=read_int(section, "query", "limit"))


def check_query(config: QueryConfig) -> None:
    """Validate query domain constraints."""
    if config.limit <= 0:
        raise ValueError("query.limit must be positive")
