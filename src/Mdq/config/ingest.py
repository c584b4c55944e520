"""Ingest domain configuration: where source documents live."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from Mdq.config.common import get_section, read_str_list


@dataclass(frozen=True, slots=True)
class IngestConfig:
    """Store validated ingest settings.

    Attributes:
        source_glob: Paths or glob patterns `update` reads when given none.
        extensions: File suffixes accepted during ingestion, lowercase with
            a leading dot.
    """

    source_glob: tuple[str, ...]
    extensions: tuple[str, ...]


def load_ingest(raw: Mapping[str, Any]) -> IngestConfig:
    """Load ingest domain config from raw mapping."""
    section = get_section(raw, "ingest")
    return IngestConfig(
        source_glob=tuple(p.strip() for p in read_str_list(section, "ingest", "source_glob")),
        extensions=tuple(
            _normalize_extension(ext) for ext in read_str_list(section, "ingest", "extensions")
        ),
    )


def check_ingest(config: IngestConfig) -> None:
    """Validate ingest domain constraints."""
    if not config.extensions:
        raise ValueError("ingest.extensions must not be empty")
    if "." in config.extensions:
        raise ValueError("ingest.extensions must not contain empty suffixes")
    if "" in config.source_glob:
        raise ValueError("ingest.source_glob must not contain empty patterns")


def _normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    return ext if ext.startswith(".") else "." + ext
