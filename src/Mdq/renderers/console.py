"""Console text output renderers.

Renders a list of `SearchHit` into human-friendly text.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from Mdq.engine.searcher import SearchHit


def _fmt_date(epoch: int) -> str:
    """Format epoch seconds as a short UTC date (YYYY-mm-dd)."""
    return datetime.fromtimestamp(epoch, tz=timezone.utc).strftime("%Y-%m-%d")


def render_text(hits: Iterable[SearchHit]) -> str:
    """Render hits into a human-readable text block.

    Args:
        hits: Iterable of ranked hits.

    Returns:
        A formatted string ready to be printed; empty when there are no hits.
    """
    lines: list[str] = []
    for hit in hits:
        doc = hit.document
        lines.append(f"{hit.rank}. {doc.title}")
        if doc.subtitle:
            lines.append(f"   {doc.subtitle}")
        if doc.authors:
            lines.append(f"   Authors: {', '.join(doc.authors)}")
        lines.append(f"   Date: {_fmt_date(doc.date)}  Score: {hit.score:.3f}")
        if doc.tags:
            lines.append(f"   Tags: {', '.join(doc.tags)}")
        lines.append(f"   Path: {doc.full_path or doc.filename}")
        lines.append("")
    if not lines:
        return ""
    return "\n".join(lines).rstrip() + "\n"
