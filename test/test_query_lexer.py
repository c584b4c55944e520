"""Tests for query tokenization."""

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from Mdq.core.errors import UnterminatedQuote
from Mdq.core.query import FieldTag
from Mdq.query.lexer import QueryLexer, Token, TokenKind


def _significant(tokens: list[Token]) -> list[Token]:
    return [t for t in tokens if t.kind is not TokenKind.WHITESPACE]


class TestQueryLexer(unittest.TestCase):
    def setUp(self) -> None:
        self.lexer = QueryLexer()

    def test_field_word_and_phrase_spans(self) -> None:
        tokens = self.lexer.tokenize('title:foo "baz bar"')
        self.assertEqual(
            tokens,
            [
                Token(TokenKind.WORD, "foo", 0, 9, FieldTag.TITLE),
                Token(TokenKind.WHITESPACE, " ", 9, 10),
                Token(TokenKind.PHRASE, "baz bar", 10, 19),
            ],
        )
        self.assertEqual(tokens[2].words, ("baz", "bar"))

    def test_field_phrase(self) -> None:
        (token,) = self.lexer.tokenize('author:"bob alice"')
        self.assertIs(token.kind, TokenKind.PHRASE)
        self.assertIs(token.field, FieldTag.AUTHOR)
        self.assertEqual(token.words, ("bob", "alice"))

    def test_field_keyword_is_case_insensitive(self) -> None:
        (token,) = self.lexer.tokenize("TiTlE:x")
        self.assertIs(token.field, FieldTag.TITLE)
        self.assertEqual(token.text, "x")

    def test_unknown_field_is_plain_word(self) -> None:
        (token,) = self.lexer.tokenize("foo:bar")
        self.assertIs(token.kind, TokenKind.WORD)
        self.assertIsNone(token.field)
        self.assertEqual(token.text, "foo:bar")

    def test_field_without_value_is_plain_word(self) -> None:
        tokens = _significant(self.lexer.tokenize("title: foo"))
        self.assertEqual([(t.text, t.field) for t in tokens], [("title:", None), ("foo", None)])

    def test_quote_inside_word_is_literal(self) -> None:
        (token,) = self.lexer.tokenize("don't")
        self.assertIs(token.kind, TokenKind.WORD)
        self.assertEqual(token.text, "don't")

    def test_single_quoted_phrase(self) -> None:
        (token,) = self.lexer.tokenize("'rock and roll'")
        self.assertIs(token.kind, TokenKind.PHRASE)
        self.assertEqual(token.words, ("rock", "and", "roll"))

    def test_phrase_keeps_inner_whitespace(self) -> None:
        (token,) = self.lexer.tokenize('"a  b"')
        self.assertEqual(token.text, "a  b")
        self.assertEqual(token.words, ("a", "b"))

    def test_unterminated_quote_reports_position(self) -> None:
        with self.assertRaises(UnterminatedQuote) as ctx:
            self.lexer.tokenize('x "foo bar')
        self.assertEqual(ctx.exception.position, 2)
        self.assertEqual(ctx.exception.quote, '"')

    def test_tokens_cover_input(self) -> None:
        text = '  a  title:"b c"\td '
        tokens = self.lexer.tokenize(text)
        self.assertEqual(tokens[0].start, 0)
        self.assertEqual(tokens[-1].end, len(text))
        for prev, nxt in zip(tokens, tokens[1:]):
            self.assertEqual(prev.end, nxt.start)


if __name__ == "__main__":
    unittest.main()
