"""Tokenizer for the query language.

Splits query text into whitespace runs, bare words, quoted phrases and
field-qualified terms. Tokens keep their character span so the operator
scanner can cut the original text at token boundaries.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from Mdq.core.errors import UnterminatedQuote
from Mdq.core.query import FieldTag

QUOTES = ("\"", "'")

_WHITESPACE_RE = re.compile(r"\s+")
_WORD_RE = re.compile(r"\S+")
_FIELD_RE = re.compile(r"([A-Za-z]+):(?=\S)")


class TokenKind(Enum):
    WHITESPACE = "whitespace"
    WORD = "word"
    PHRASE = "phrase"


@dataclass(frozen=True, slots=True)
class Token:
    """One lexed unit of query text.

    Attributes:
        kind: Token category.
        text: Word text, or the phrase content between the quotes.
        start: Offset of the first character (field keyword included).
        end: Offset one past the last character.
        field: Field qualifier for `field:value` tokens.
    """

    kind: TokenKind
    text: str
    start: int
    end: int
    field: Optional[FieldTag] = None

    @property
    def words(self) -> tuple[str, ...]:
        """Whitespace-separated words of a phrase (or the word itself)."""
        if self.kind is TokenKind.PHRASE:
            return tuple(self.text.split())
        return (self.text,)


class QueryLexer:
    """Split query text into tokens.

    Rules:
    - A bare word is any run of non-whitespace characters.
    - A quote opens a phrase only at the start of a token or right after a
      recognized `field:`; elsewhere it is an ordinary character (`don't`).
    - `field:value` is recognized only for known field names followed
      directly by a value. Anything else containing a colon is a bare word.
    """

    def tokenize(self, text: str) -> list[Token]:
        """Tokenize query text.

        Args:
            text: Raw query text.

        Returns:
            Tokens covering the whole input, in order.

        Raises:
            UnterminatedQuote: If a phrase has no closing quote.
        """
        tokens: list[Token] = []
        pos = 0
        length = len(text)
        while pos < length:
            ws = _WHITESPACE_RE.match(text, pos)
            if ws:
                tokens.append(Token(TokenKind.WHITESPACE, ws.group(), pos, ws.end()))
                pos = ws.end()
                continue

            field, value_start = self._match_field(text, pos)
            if text[value_start] in QUOTES:
                token = self._read_phrase(text, pos, value_start, field)
            else:
                word = _WORD_RE.match(text, value_start)
                token = Token(TokenKind.WORD, word.group(), pos, word.end(), field)
            tokens.append(token)
            pos = token.end
        return tokens

    def _match_field(self, text: str, pos: int) -> tuple[Optional[FieldTag], int]:
        match = _FIELD_RE.match(text, pos)
        if not match:
            return None, pos
        field = FieldTag.from_keyword(match.group(1))
        if field is None:
            return None, pos
        return field, match.end()

    def _read_phrase(
        self, text: str, start: int, quote_pos: int, field: Optional[FieldTag]
    ) -> Token:
        quote = text[quote_pos]
        close = text.find(quote, quote_pos + 1)
        if close < 0:
            raise UnterminatedQuote(quote_pos, quote)
        return Token(TokenKind.PHRASE, text[quote_pos + 1:close], start, close + 1, field)
