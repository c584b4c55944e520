"""Serialize documents per `SerializationMode`."""

from __future__ import annotations

import json
from typing import Any

import yaml

from Mdq.core.models import Document, SerializationMode, derive_identifier
from Mdq.document.dates import format_date

_STORAGE_FIELDS = (
    "identifier",
    "filename",
    "full_path",
    "authors",
    "date",
    "tags",
    "title",
    "subtitle",
    "body",
    "weight",
    "writes",
    "views",
)


def render(doc: Document, mode: SerializationMode) -> str:
    """Render a document as text.

    Args:
        doc: Document to serialize.
        mode: Projection to apply.

    Returns:
        - HUMAN: the body only.
        - DISK: a front-matter block followed by the body, suitable for
          rewriting the source file.
        - STORAGE: JSON with sorted keys holding every field and the body.
    """
    if mode is SerializationMode.HUMAN:
        return doc.body
    if mode is SerializationMode.DISK:
        return _render_disk(doc)
    if mode is SerializationMode.STORAGE:
        return json.dumps(_storage_dict(doc), ensure_ascii=False, sort_keys=True)
    raise ValueError(f"Unsupported serialization mode: {mode!r}")


def load_storage(payload: str) -> Document:
    """Rebuild a document from a STORAGE payload.

    The identifier is derived from the title again rather than trusted.

    Raises:
        ValueError: If the payload is not a STORAGE rendering.
    """
    data = json.loads(payload)
    if not isinstance(data, dict) or "title" not in data or "date" not in data:
        raise ValueError("Payload is not a stored document")
    title = str(data["title"])
    return Document(
        title=title,
        date=int(data["date"]),
        identifier=derive_identifier(title),
        filename=str(data.get("filename") or ""),
        full_path=str(data.get("full_path") or ""),
        authors=tuple(data.get("authors") or ()),
        tags=tuple(data.get("tags") or ()),
        subtitle=str(data.get("subtitle") or ""),
        body=str(data.get("body") or ""),
        weight=int(data.get("weight") or 0),
        writes=int(data.get("writes") or 0),
        views=int(data.get("views") or 0),
    )


def _storage_dict(doc: Document) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for name in _STORAGE_FIELDS:
        value = getattr(doc, name)
        out[name] = list(value) if isinstance(value, tuple) else value
    return out


def _render_disk(doc: Document) -> str:
    front: dict[str, Any] = {"title": doc.title}
    if doc.subtitle:
        front["subtitle"] = doc.subtitle
    if doc.authors:
        front["authors"] = list(doc.authors)
    front["date"] = format_date(doc.date)
    if doc.tags:
        front["tags"] = list(doc.tags)
    if doc.filename:
        front["filename"] = doc.filename
    if doc.weight:
        front["weight"] = doc.weight

    block = yaml.safe_dump(
        front,
        allow_unicode=True,
        default_flow_style=False,
        sort_keys=False,
    )
    return f"---\n{block}---\n{doc.body}"
