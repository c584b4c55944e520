"""JSON output renderers.

Renders a list of `SearchHit` into JSON-serializable objects.
"""

from __future__ import annotations

import json
from typing import Iterable

from Mdq.document.dates import format_date
from Mdq.engine.searcher import SearchHit


def render_json(hits: Iterable[SearchHit]) -> list[dict]:
    """Render hits into JSON-serializable Python objects.

    The body is left out; `full_path` points at it.
    """
    out: list[dict] = []
    for hit in hits:
        doc = hit.document
        out.append(
            {
                "rank": hit.rank,
                "score": hit.score,
                "identifier": doc.identifier,
                "title": doc.title,
                "subtitle": doc.subtitle,
                "authors": list(doc.authors),
                "date": format_date(doc.date),
                "tags": list(doc.tags),
                "filename": doc.filename,
                "full_path": doc.full_path,
                "weight": doc.weight,
                "writes": doc.writes,
                "views": doc.views,
            }
        )
    return out


def dump_json(hits: Iterable[SearchHit]) -> str:
    """Render hits as an indented JSON document."""
    return json.dumps(render_json(hits), ensure_ascii=False, indent=2) + "\n"
