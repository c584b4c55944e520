"""Tests for translating query trees into SQL plans."""

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from Mdq.core.errors import EngineRejected
from Mdq.core.query import BinaryOp, FieldTag, Operator, Phrase, Term
from Mdq.engine.builder import build_query
from Mdq.query.compiler import compile_query


def _plan(text: str):
    return build_query(compile_query(text))


class TestLeaves(unittest.TestCase):
    def test_bare_term_searches_body(self) -> None:
        self.assertEqual(build_query(Term("foo")).params, ('{body} : "foo"',))

    def test_field_term_uses_field_column(self) -> None:
        self.assertEqual(build_query(Term("foo", FieldTag.TITLE)).params, ('{S} : "foo"',))
        self.assertEqual(build_query(Term("x", FieldTag.FULLPATH)).params, ('{F} : "x"',))

    def test_phrase(self) -> None:
        plan = build_query(Phrase(("foo", "bar"), FieldTag.AUTHOR))
        self.assertEqual(plan.params, ('{A} : "foo bar"',))

    def test_quotes_are_escaped(self) -> None:
        self.assertEqual(build_query(Term('say"what')).params, ('{body} : "say""what"',))

    def test_leaf_selects_docid_and_weight(self) -> None:
        sql = build_query(Term("foo")).sql
        self.assertIn("docid", sql)
        self.assertIn("bm25(document_terms)", sql)


class TestOperators(unittest.TestCase):
    def test_params_follow_textual_order(self) -> None:
        plan = _plan("a AND b OR c AND NOT d")
        self.assertEqual(
            plan.params,
            ('{body} : "a"', '{body} : "b"', '{body} : "c"', '{body} : "d"'),
        )

    def test_every_boolean_operator_builds(self) -> None:
        for op in (
            Operator.AND,
            Operator.OR,
            Operator.XOR,
            Operator.AND_NOT,
            Operator.AND_MAYBE,
            Operator.FILTER,
            Operator.SYNONYM,
            Operator.ELITE_SET,
        ):
            with self.subTest(op=op):
                plan = build_query(BinaryOp(op, Term("a"), Term("b")))
                self.assertEqual(len(plan.params), 2)

    def test_near_merges_into_one_match(self) -> None:
        self.assertEqual(_plan("a NEAR b").params, ('{body} : NEAR("a" "b", 10)',))
        self.assertEqual(
            _plan('title:a NEAR title:"b c" NEAR title:d').params,
            ('{S} : NEAR("a" "b c" "d", 10)',),
        )

    def test_phrase_operator_merges_words(self) -> None:
        self.assertEqual(_plan('a PHRASE "b c"').params, ('{body} : "a b c"',))

    def test_near_rejects_mixed_fields(self) -> None:
        with self.assertRaises(EngineRejected):
            _plan("title:a NEAR b")

    def test_near_rejects_nested_operators(self) -> None:
        with self.assertRaises(EngineRejected):
            _plan("a OR b NEAR c")

    def test_scale(self) -> None:
        plan = _plan("a SCALED 2.5")
        self.assertEqual(plan.params, ('{body} : "a"', 2.5))

    def test_scale_rejects_bad_factors(self) -> None:
        for text in ("a SCALED x", "a SCALED -1", "a SCALED tag:2", "a SCALED 1 2"):
            with self.subTest(text=text):
                with self.assertRaises(EngineRejected):
                    _plan(text)


class TestDateOperators(unittest.TestCase):
    def test_value_ge_uses_start_of_day(self) -> None:
        self.assertEqual(_plan("a > 2021-01-01").params[-1], 1609459200)

    def test_value_le_uses_end_of_day(self) -> None:
        self.assertEqual(_plan("a < 2021-01-01").params[-1], 1609545599)

    def test_range_bounds_are_ordered(self) -> None:
        forward = _plan("a RANGE 2021-01-01 2021-01-02").params[-2:]
        reverse = _plan("a RANGE 2021-01-02 2021-01-01").params[-2:]
        self.assertEqual(forward, (1609459200, 1609631999))
        self.assertEqual(reverse, forward)

    def test_date_field_term_is_accepted(self) -> None:
        self.assertEqual(_plan("a > date:2021-01-01").params[-1], 1609459200)

    def test_rejects_non_dates(self) -> None:
        for text in ("a > soon", "a > title:2021-01-01", "a RANGE 2021-01-01", "a < 2021-01-01 x"):
            with self.subTest(text=text):
                with self.assertRaises(EngineRejected):
                    _plan(text)


if __name__ == "__main__":
    unittest.main()
