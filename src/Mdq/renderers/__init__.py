"""Output renderers for non-interactive query results.

Exports one renderer per output format and a factory that picks one by
name.
"""

from __future__ import annotations

from typing import Callable, Iterable

from Mdq.engine.searcher import SearchHit
from Mdq.renderers.console import render_text
from Mdq.renderers.json import dump_json, render_json

HitRenderer = Callable[[Iterable[SearchHit]], str]

_RENDERERS: dict[str, HitRenderer] = {
    "text": render_text,
    "json": dump_json,
}

OUTPUT_FORMATS = tuple(_RENDERERS)


def create_hit_renderer(output_format: str) -> HitRenderer:
    """Return the renderer for an output format.

    Args:
        output_format: One of `OUTPUT_FORMATS`.

    Raises:
        ValueError: If the format is unknown.
    """
    try:
        return _RENDERERS[output_format]
    except KeyError:
        raise ValueError(f"Unsupported output format: {output_format}") from None


__all__ = [
    "HitRenderer",
    "OUTPUT_FORMATS",
    "create_hit_renderer",
    "dump_json",
    "render_json",
    "render_text",
]
