"""Markdown + front matter parser.

Turns the full text of one source file into a `Document`. Example input::

    ---
    author: Steve Sosik
    date: 2021-06-22T12:48:16-0400
    tags:
    - tika
    title: This is an example note
    ---

    Some note here formatted with Markdown syntax

Reading the file is the caller's job; this module performs no I/O.
"""

from __future__ import annotations

from typing import Any, Mapping

from Mdq.core.errors import MalformedFrontMatter
from Mdq.core.models import Document, derive_identifier
from Mdq.document.dates import normalize_date
from Mdq.document.frontmatter import load_front_matter, split_front_matter


def parse(raw_text: str, *, filename: str = "", full_path: str = "") -> Document:
    """Parse a Markdown document with YAML front matter.

    Args:
        raw_text: Full file contents.
        filename: Fallback used when the front matter has no `filename`.
        full_path: Path the text was read from.

    Returns:
        Normalized document with `identifier` derived from `title`.

    Raises:
        NoFrontMatter: If no front-matter block is present.
        MalformedFrontMatter: If the block is not a valid description.
        DateParseError: If `date` cannot be normalized.
    """
    raw_yaml, body = split_front_matter(raw_text)
    data = load_front_matter(raw_yaml)
    return _build_document(data, raw_yaml, body=body, filename=filename, full_path=full_path)


def _build_document(
    data: Mapping[str, Any],
    raw_yaml: str,
    *,
    body: str,
    filename: str,
    full_path: str,
) -> Document:
    title = data.get("title")
    if title is None:
        raise MalformedFrontMatter("Missing required field: title", raw_yaml)
    title = _expect_str(title, "title", raw_yaml)

    if "date" not in data or data["date"] is None:
        raise MalformedFrontMatter("Missing required field: date", raw_yaml)
    date = normalize_date(data["date"])

    if "authors" in data and "author" in data:
        raise MalformedFrontMatter("Use either author or authors, not both", raw_yaml)
    author_key = "authors" if "authors" in data else "author"

    fm_filename = data.get("filename")
    if fm_filename is not None:
        fm_filename = _expect_str(fm_filename, "filename", raw_yaml)

    return Document(
        title=title,
        date=date,
        identifier=derive_identifier(title),
        filename=fm_filename or filename,
        full_path=full_path,
        authors=string_or_list(data.get(author_key), author_key, raw_yaml),
        tags=string_or_list(data.get("tags"), "tags", raw_yaml),
        subtitle=_expect_str(data.get("subtitle") or "", "subtitle", raw_yaml),
        body=body,
        weight=_expect_int(data.get("weight", 0), "weight", raw_yaml),
        writes=_expect_count(data.get("writes", 0), "writes", raw_yaml),
        views=_expect_count(data.get("views", 0), "views", raw_yaml),
    )


def string_or_list(value: Any, key: str, raw_yaml: str) -> tuple[str, ...]:
    """Normalize a scalar-or-sequence field into a tuple of strings.

    A bare string becomes a one-element tuple, a list keeps its order and its
    repeats, and a missing value becomes an empty tuple.

    Raises:
        MalformedFrontMatter: If the value is neither a string nor a list of
            strings.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list):
        out: list[str] = []
        for idx, item in enumerate(value):
            if not isinstance(item, str):
                raise MalformedFrontMatter(f"{key}[{idx}] must be a string", raw_yaml)
            out.append(item)
        return tuple(out)
    raise MalformedFrontMatter(f"{key} must be a string or a list of strings", raw_yaml)


def _expect_str(value: Any, key: str, raw_yaml: str) -> str:
    if not isinstance(value, str):
        raise MalformedFrontMatter(f"{key} must be a string", raw_yaml)
    return value


def _expect_int(value: Any, key: str, raw_yaml: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedFrontMatter(f"{key} must be an integer", raw_yaml)
    return value


def _expect_count(value: Any, key: str, raw_yaml: str) -> int:
    count = _expect_int(value, key, raw_yaml)
    if count < 0:
        raise MalformedFrontMatter(f"{key} must not be negative", raw_yaml)
    return count


__all__ = ["parse", "string_or_list"]
