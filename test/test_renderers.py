"""Tests for hit renderers."""

import json
import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from Mdq.core.models import Document
from Mdq.engine.searcher import SearchHit
from Mdq.renderers import create_hit_renderer


def _hit() -> SearchHit:
    doc = Document(
        title="Vim tips",
        date=1624380496,
        identifier="Vimtips",
        filename="vim.md",
        full_path="/notes/vim.md",
        authors=("Alice", "Bob"),
        tags=("editor",),
        body="secret body",
    )
    return SearchHit(document=doc, score=1.23456, rank=1)


class TestRenderers(unittest.TestCase):
    def test_text(self) -> None:
        text = create_hit_renderer("text")([_hit()])
        self.assertEqual(
            text,
            "1. Vim tips\n"
            "   Authors: Alice, Bob\n"
            "   Date: 2021-06-22  Score: 1.235\n"
            "   Tags: editor\n"
            "   Path: /notes/vim.md\n",
        )

    def test_text_without_hits(self) -> None:
        self.assertEqual(create_hit_renderer("text")([]), "")

    def test_json(self) -> None:
        (data,) = json.loads(create_hit_renderer("json")([_hit()]))
        self.assertEqual(data["date"], "2021-06-22T16:48:16+00:00")
        self.assertEqual(data["authors"], ["Alice", "Bob"])
        self.assertNotIn("body", data)

    def test_unknown_format(self) -> None:
        with self.assertRaises(ValueError):
            create_hit_renderer("html")


if __name__ == "__main__":
    unittest.main()
