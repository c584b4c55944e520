"""Translate query trees into SQL plans over the FTS5 index.

Every node becomes a sub-select yielding ``(docid, weight)`` rows, one row
per matching document. Leaves are FTS5 ``MATCH`` queries weighted by
``-bm25()``; binary operators combine their children's row sets:

==============  ==========================================================
And             inner join, weights summed
Or, EliteSet    union, weights summed
AndNot          left rows whose docid is absent from right
Xor             union, documents matched by exactly one side
AndMaybe        left join, right weight added when present
Filter          left rows whose docid is present in right, left weight
Synonym         union, best weight kept
Near            one ``NEAR(...)`` match over leaves of one field
Phrase          one phrase match over leaves of one field
ScaleWeight     left weight multiplied by a non-negative number
ValueGe/Le      left restricted by the stored document date
ValueRange      left restricted to an inclusive date range
==============  ==========================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union

from Mdq.core.errors import DateParseError, EngineRejected
from Mdq.core.query import BinaryOp, FieldTag, Node, Operator, Phrase, Term, describe
from Mdq.document.dates import parse_date_bound

BODY_COLUMN = "body"
NEAR_DISTANCE = 10

Leaf = Union[Term, Phrase]


@dataclass(frozen=True, slots=True)
class SqlQuery:
    """SQL text with its positional parameters.

    The statement selects ``docid`` and ``weight`` columns.
    """

    sql: str
    params: tuple = ()


def build_query(node: Node) -> SqlQuery:
    """Build the SQL plan for a query tree.

    Raises:
        EngineRejected: If the tree holds a combination the index cannot
            express.
    """
    if isinstance(node, (Term, Phrase)):
        return _match(_column(node.field), _fts_string(_leaf_words(node)))
    if isinstance(node, BinaryOp):
        handler = _HANDLERS.get(node.op)
        if handler is None:
            raise EngineRejected(f"Unsupported operator {node.op.value}")
        return handler(node)
    raise EngineRejected(f"Unsupported node {node!r}")


def _column(field: Optional[FieldTag]) -> str:
    return field.prefix if field is not None else BODY_COLUMN


def _leaf_words(leaf: Leaf) -> tuple[str, ...]:
    return (leaf.text,) if isinstance(leaf, Term) else leaf.words


def _fts_string(words: Sequence[str]) -> str:
    text = " ".join(words)
    return '"' + text.replace('"', '""') + '"'


def _match(column: str, expression: str) -> SqlQuery:
    # LIMIT -1 keeps the planner from flattening the scan away from bm25().
    return SqlQuery(
        "SELECT rowid AS docid, -bm25(document_terms) AS weight "
        "FROM document_terms WHERE document_terms MATCH ? LIMIT -1",
        ("{%s} : %s" % (column, expression),),
    )


def _join(node: BinaryOp) -> SqlQuery:
    left, right = build_query(node.left), build_query(node.right)
    return SqlQuery(
        f"SELECT l.docid AS docid, l.weight + r.weight AS weight "
        f"FROM ({left.sql}) AS l JOIN ({right.sql}) AS r ON l.docid = r.docid",
        left.params + right.params,
    )


def _left_join(node: BinaryOp) -> SqlQuery:
    left, right = build_query(node.left), build_query(node.right)
    return SqlQuery(
        f"SELECT l.docid AS docid, l.weight + COALESCE(r.weight, 0) AS weight "
        f"FROM ({left.sql}) AS l LEFT JOIN ({right.sql}) AS r ON l.docid = r.docid",
        left.params + right.params,
    )


def _union(aggregate: str, having: str = "") -> Callable[[BinaryOp], SqlQuery]:
    def handler(node: BinaryOp) -> SqlQuery:
        left, right = build_query(node.left), build_query(node.right)
        sql = (
            f"SELECT docid, {aggregate}(weight) AS weight FROM ("
            f"SELECT docid, weight FROM ({left.sql}) "
            f"UNION ALL SELECT docid, weight FROM ({right.sql})"
            f") GROUP BY docid"
        )
        if having:
            sql += f" HAVING {having}"
        return SqlQuery(sql, left.params + right.params)

    return handler


def _membership(negate: bool) -> Callable[[BinaryOp], SqlQuery]:
    keyword = "NOT IN" if negate else "IN"

    def handler(node: BinaryOp) -> SqlQuery:
        left, right = build_query(node.left), build_query(node.right)
        return SqlQuery(
            f"SELECT docid, weight FROM ({left.sql}) "
            f"WHERE docid {keyword} (SELECT docid FROM ({right.sql}))",
            left.params + right.params,
        )

    return handler


def _collect_leaves(node: Node, op: Operator) -> list[Leaf]:
    """Flatten a chain of `op` nodes into its leaves, in textual order."""
    if isinstance(node, (Term, Phrase)):
        return [node]
    if node.op is op:
        return _collect_leaves(node.left, op) + _collect_leaves(node.right, op)
    raise EngineRejected(f"{op.value} needs terms or phrases, got {describe(node)}")


def _single_column(leaves: Sequence[Leaf], op: Operator) -> str:
    columns = {_column(leaf.field) for leaf in leaves}
    if len(columns) != 1:
        raise EngineRejected(f"{op.value} needs all terms in one field")
    return columns.pop()


def _near(node: BinaryOp) -> SqlQuery:
    leaves = _collect_leaves(node, Operator.NEAR)
    column = _single_column(leaves, Operator.NEAR)
    phrases = " ".join(_fts_string(_leaf_words(leaf)) for leaf in leaves)
    return _match(column, f"NEAR({phrases}, {NEAR_DISTANCE})")


def _phrase(node: BinaryOp) -> SqlQuery:
    leaves = _collect_leaves(node, Operator.PHRASE)
    column = _single_column(leaves, Operator.PHRASE)
    words = [word for leaf in leaves for word in _leaf_words(leaf)]
    return _match(column, _fts_string(words))


def _scale(node: BinaryOp) -> SqlQuery:
    factor_node = node.right
    if not isinstance(factor_node, Term) or factor_node.field is not None:
        raise EngineRejected(f"SCALED needs a number, got {describe(factor_node)}")
    try:
        factor = float(factor_node.text)
    except ValueError as e:
        raise EngineRejected(f"SCALED needs a number, got {factor_node.text!r}") from e
    if factor < 0:
        raise EngineRejected(f"SCALED factor must not be negative, got {factor_node.text!r}")
    left = build_query(node.left)
    return SqlQuery(
        f"SELECT docid, weight * ? AS weight FROM ({left.sql})",
        left.params + (factor,),
    )


def _date_terms(node: Node, count: int, op: Operator) -> list[str]:
    leaves = _collect_leaves(node, Operator.OR)
    if len(leaves) != count or not all(_is_date_term(leaf) for leaf in leaves):
        noun = "a date" if count == 1 else f"{count} dates"
        raise EngineRejected(f"{op.value} needs {noun}, got {describe(node)}")
    return [leaf.text for leaf in leaves]


def _is_date_term(leaf: Leaf) -> bool:
    return isinstance(leaf, Term) and leaf.field in (None, FieldTag.DATE)


def _date_bound(text: str, *, end_of_day: bool) -> int:
    try:
        return parse_date_bound(text, end_of_day=end_of_day)
    except DateParseError as e:
        raise EngineRejected(f"Not a date: {text!r}") from e


def _date_filter(node: BinaryOp, condition: str, bounds: tuple) -> SqlQuery:
    left = build_query(node.left)
    return SqlQuery(
        f"SELECT l.docid AS docid, l.weight AS weight FROM ({left.sql}) AS l "
        f"JOIN documents AS d ON d.id = l.docid WHERE {condition}",
        left.params + bounds,
    )


def _value_ge(node: BinaryOp) -> SqlQuery:
    (text,) = _date_terms(node.right, 1, node.op)
    return _date_filter(node, "d.date >= ?", (_date_bound(text, end_of_day=False),))


def _value_le(node: BinaryOp) -> SqlQuery:
    (text,) = _date_terms(node.right, 1, node.op)
    return _date_filter(node, "d.date <= ?", (_date_bound(text, end_of_day=True),))


def _value_range(node: BinaryOp) -> SqlQuery:
    low_text, high_text = _date_terms(node.right, 2, node.op)
    low = _date_bound(low_text, end_of_day=False)
    high = _date_bound(high_text, end_of_day=True)
    if low > high:
        low, high = _date_bound(high_text, end_of_day=False), _date_bound(low_text, end_of_day=True)
    return _date_filter(node, "d.date BETWEEN ? AND ?", (low, high))


_HANDLERS: dict[Operator, Callable[[BinaryOp], SqlQuery]] = {
    Operator.AND: _join,
    Operator.OR: _union("SUM"),
    Operator.ELITE_SET: _union("SUM"),
    Operator.XOR: _union("SUM", having="COUNT(*) = 1"),
    Operator.SYNONYM: _union("MAX"),
    Operator.AND_NOT: _membership(negate=True),
    Operator.FILTER: _membership(negate=False),
    Operator.AND_MAYBE: _left_join,
    Operator.NEAR: _near,
    Operator.PHRASE: _phrase,
    Operator.SCALE_WEIGHT: _scale,
    Operator.VALUE_GE: _value_ge,
    Operator.VALUE_LE: _value_le,
    Operator.VALUE_RANGE: _value_range,
}
