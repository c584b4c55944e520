"""Locate the next boolean operator in query text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from Mdq.core.query import Operator
from Mdq.query.lexer import QueryLexer, Token, TokenKind

# Earlier entries win when two keywords start at the same token, so that
# `AND MAYBE` and `AND NOT` are never split as `AND`.
OPERATOR_PRIORITY: tuple[tuple[str, Operator], ...] = (
    ("AND MAYBE", Operator.AND_MAYBE),
    ("SYNONYM", Operator.SYNONYM),
    ("AND NOT", Operator.AND_NOT),
    ("FILTER", Operator.FILTER),
    ("PHRASE", Operator.PHRASE),
    ("SCALED", Operator.SCALE_WEIGHT),
    ("RANGE", Operator.VALUE_RANGE),
    ("ELITE", Operator.ELITE_SET),
    ("NEAR", Operator.NEAR),
    ("AND", Operator.AND),
    ("XOR", Operator.XOR),
    ("OR", Operator.OR),
    (">", Operator.VALUE_GE),
    ("<", Operator.VALUE_LE),
)


@dataclass(frozen=True, slots=True)
class OperatorMatch:
    """An operator occurrence in scanned text.

    Attributes:
        keyword: Canonical keyword (`AND NOT`).
        operator: Operator the keyword stands for.
        start: Offset of the keyword's first character.
        end: Offset one past the keyword's last character.
    """

    keyword: str
    operator: Operator
    start: int
    end: int


class OperatorScanner:
    """Find the leftmost operator keyword, case-insensitively.

    Keywords are matched against whole bare-word tokens only. Text inside a
    quoted phrase or a field value is never an operator.
    """

    def __init__(self, lexer: Optional[QueryLexer] = None) -> None:
        self.lexer = lexer or QueryLexer()
        self._keywords = [(kw.split(), kw, op) for kw, op in OPERATOR_PRIORITY]

    def find(self, text: str) -> Optional[OperatorMatch]:
        """Return the first operator occurrence in `text`, or None.

        Raises:
            UnterminatedQuote: If the text contains an unclosed phrase.
        """
        tokens = self.lexer.tokenize(text)
        for idx, token in enumerate(tokens):
            if not _is_bare_word(token):
                continue
            for words, keyword, operator in self._keywords:
                last = _match_words(tokens, idx, words)
                if last is not None:
                    return OperatorMatch(keyword, operator, token.start, tokens[last].end)
        return None


def _is_bare_word(token: Token) -> bool:
    return token.kind is TokenKind.WORD and token.field is None


def _match_words(tokens: Sequence[Token], idx: int, words: Sequence[str]) -> Optional[int]:
    """Match keyword words at `idx`, allowing whitespace between them.

    Returns:
        Index of the last matched token, or None.
    """
    pos = idx
    for n, word in enumerate(words):
        if n:
            pos += 1
            if pos >= len(tokens) or tokens[pos].kind is not TokenKind.WHITESPACE:
                return None
            pos += 1
        if pos >= len(tokens):
            return None
        token = tokens[pos]
        if not _is_bare_word(token) or token.text.upper() != word:
            return None
    return pos
