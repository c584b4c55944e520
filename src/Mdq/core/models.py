from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

_IDENTIFIER_STRIP_RE = re.compile(r"[^A-Za-z0-9_-]")


class SerializationMode(Enum):
    """Projection used when rendering a Document to text.

    - STORAGE: every field plus body, the payload kept by the search index
    - DISK: front matter + body for rewriting the source file
    - HUMAN: body only, for preview and pager output
    """

    STORAGE = "storage"
    DISK = "disk"
    HUMAN = "human"


def derive_identifier(title: str) -> str:
    """Keep only `[A-Za-z0-9_-]` characters of a title, in order.

    The result may be empty when the title has no permitted characters.
    """
    return _IDENTIFIER_STRIP_RE.sub("", title)


@dataclass(frozen=True, slots=True)
class Document:
    """Canonical in-memory representation of one Markdown source file.

    Attributes:
        title: Required document title.
        date: Creation timestamp as epoch seconds.
        identifier: Engine-safe key derived from `title`.
        filename: File name, from front matter or the file's base name.
        full_path: Path the document was read from.
        authors: Author names, in front-matter order.
        tags: Tags, in front-matter order (repeats kept).
        subtitle: Optional subtitle.
        body: Markdown content after the front-matter block.
        weight: User-adjustable ranking boost.
        writes: Number of edits made through mdq.
        views: Number of times the document was opened in the pager.
    """

    title: str
    date: int
    identifier: str = ""
    filename: str = ""
    full_path: str = ""
    authors: Sequence[str] = ()
    tags: Sequence[str] = ()
    subtitle: str = ""
    body: str = ""
    weight: int = 0
    writes: int = 0
    views: int = 0

    def __post_init__(self) -> None:
        # Normalize list inputs so that equality and hashing behave.
        object.__setattr__(self, "authors", tuple(self.authors))
        object.__setattr__(self, "tags", tuple(self.tags))
