"""Compile query text into a query tree.

The compiler has no operator precedence. It repeatedly splits the remaining
text at the first operator keyword, compiles the text before it, and folds
the result onto the tree built so far::

    a OR b AND c   ->   ((a Or b) And c)

Inside one chunk, words, phrases and field terms are joined with `Or`.
"""

from __future__ import annotations

from typing import Optional

from Mdq.core.errors import EmptyQuery, QueryTooComplex
from Mdq.core.query import BinaryOp, Node, Operator, Phrase, Term
from Mdq.query.lexer import QueryLexer, Token, TokenKind
from Mdq.query.scanner import OperatorScanner

MAX_OPERATORS = 50


class QueryCompiler:
    """Turn query text into a left-associative tree of `Node`s.

    Args:
        max_operators: Number of operators a query may contain before
            compilation gives up with `QueryTooComplex`.
    """

    def __init__(self, max_operators: int = MAX_OPERATORS) -> None:
        self.max_operators = max_operators
        self.lexer = QueryLexer()
        self.scanner = OperatorScanner(self.lexer)

    def compile(self, text: str) -> Node:
        """Compile query text.

        Chunks that hold nothing (a leading operator, two operators in a row)
        are skipped, and the operator folded in is the last one seen before
        the next non-empty chunk. A trailing operator is ignored, so partially
        typed input still compiles.

        Args:
            text: Raw query text.

        Returns:
            Root of the query tree.

        Raises:
            EmptyQuery: If the text holds no terms.
            UnterminatedQuote: If a phrase is never closed.
            QueryTooComplex: If the text holds more than `max_operators`
                operators.
        """
        if not text.strip():
            raise EmptyQuery()

        root: Optional[Node] = None
        pending: Optional[Operator] = None
        remaining = text
        consumed = 0

        while True:
            match = self.scanner.find(remaining)
            if match is None:
                chunk, remaining = remaining, ""
            else:
                consumed += 1
                if consumed > self.max_operators:
                    raise QueryTooComplex(self.max_operators, remaining)
                chunk, remaining = remaining[:match.start], remaining[match.end:]

            node = self.compile_chunk(chunk)
            if node is not None:
                if root is None:
                    root = node
                else:
                    root = BinaryOp(pending or Operator.OR, root, node)

            if match is None:
                break
            pending = match.operator

        if root is None:
            raise EmptyQuery("Query holds no terms")
        return root

    def compile_chunk(self, chunk: str) -> Optional[Node]:
        """Compile operator-free text, joining its terms with `Or`.

        Returns:
            The chunk's tree, or None when it holds no terms.
        """
        node: Optional[Node] = None
        for token in self.lexer.tokenize(chunk):
            leaf = _token_to_node(token)
            if leaf is None:
                continue
            node = leaf if node is None else BinaryOp(Operator.OR, node, leaf)
        return node


def _token_to_node(token: Token) -> Optional[Node]:
    if token.kind is TokenKind.WORD:
        return Term(token.text, token.field)
    if token.kind is TokenKind.PHRASE:
        words = token.words
        if not words:
            return None
        return Phrase(words, token.field)
    return None


_default_compiler = QueryCompiler()


def compile_query(text: str) -> Node:
    """Compile query text with the default compiler settings."""
    return _default_compiler.compile(text)
