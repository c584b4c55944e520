"""Compiled query tree.

The query compiler turns user text into a tree of these nodes; the engine
adapter turns the tree into an executable plan. Trees are built strictly
left to right: every `BinaryOp.left` was complete before its `right` was
compiled, and no operator binds tighter than another.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class Operator(Enum):
    """Binary operators understood by the search engine."""

    AND = "And"
    AND_NOT = "AndNot"
    OR = "Or"
    XOR = "Xor"
    AND_MAYBE = "AndMaybe"
    FILTER = "Filter"
    NEAR = "Near"
    PHRASE = "Phrase"
    VALUE_RANGE = "ValueRange"
    SCALE_WEIGHT = "ScaleWeight"
    ELITE_SET = "EliteSet"
    VALUE_GE = "ValueGe"
    VALUE_LE = "ValueLe"
    SYNONYM = "Synonym"


class FieldTag(Enum):
    """Document fields that can qualify a term (`title:foo`).

    The value is the keyword typed by the user; `prefix` is the index field
    code. Filename and Fullpath share the `F` prefix.
    """

    AUTHOR = "author"
    DATE = "date"
    FILENAME = "filename"
    FULLPATH = "fullpath"
    TITLE = "title"
    SUBTITLE = "subtitle"
    TAG = "tag"

    @property
    def prefix(self) -> str:
        return _FIELD_PREFIXES[self]

    @classmethod
    def from_keyword(cls, keyword: str) -> Optional[FieldTag]:
        """Return the tag for a case-insensitive keyword, or None."""
        try:
            return cls(keyword.lower())
        except ValueError:
            return None


_FIELD_PREFIXES: dict[FieldTag, str] = {
    FieldTag.AUTHOR: "A",
    FieldTag.DATE: "D",
    FieldTag.FILENAME: "F",
    FieldTag.FULLPATH: "F",
    FieldTag.TITLE: "S",
    FieldTag.SUBTITLE: "XS",
    FieldTag.TAG: "K",
}


@dataclass(frozen=True, slots=True)
class Term:
    """A single word, optionally qualified by a field."""

    text: str
    field: Optional[FieldTag] = None


@dataclass(frozen=True, slots=True)
class Phrase:
    """A quoted multi-word unit, optionally qualified by a field."""

    words: tuple[str, ...]
    field: Optional[FieldTag] = None


@dataclass(frozen=True, slots=True)
class BinaryOp:
    """Left-associative combination of two subtrees."""

    op: Operator
    left: Node
    right: Node


Node = Union[Term, Phrase, BinaryOp]


def describe(node: Node) -> str:
    """Render a query tree as one readable line.

    Example: ``((title:foo Or "baz bar") AndNot tag:draft)``
    """
    if isinstance(node, Term):
        return _qualify(node.field, node.text)
    if isinstance(node, Phrase):
        return _qualify(node.field, '"' + " ".join(node.words) + '"')
    return f"({describe(node.left)} {node.op.value} {describe(node.right)})"


def _qualify(field: Optional[FieldTag], text: str) -> str:
    return f"{field.value}:{text}" if field is not None else text
