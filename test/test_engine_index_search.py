"""End-to-end tests for indexing documents and running compiled queries."""

import dataclasses
import sys
import tempfile
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from Mdq.core.errors import EngineRejected
from Mdq.document.parser import parse
from Mdq.engine.db import IndexManager
from Mdq.engine.indexer import DocumentIndexer
from Mdq.engine.searcher import DocumentSearcher
from Mdq.query.compiler import compile_query

NOTES = {
    "a.md": """---
title: Vim tips
authors: [Alice]
date: 2021-06-22T12:00:00Z
tags: [editor, vim]
---
Use vim to edit text quickly.
""",
    "b.md": """---
title: Emacs notes
author: Bob
date: 2020-01-15T09:30:00Z
tags: editor
---
Emacs is an editor. Also see vim.
""",
    "c.md": """---
title: Cooking
date: 2022-03-01T18:00:00Z
tags: [food]
---
Rock and roll while cooking pasta.
""",
}


class IndexTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self.manager = IndexManager(Path(self._tmpdir.name) / "index.sqlite3")
        self.indexer = DocumentIndexer(self.manager)
        self.searcher = DocumentSearcher(self.manager)
        for name, text in NOTES.items():
            self.indexer.update(parse(text, filename=name, full_path=f"/notes/{name}"))
        self.manager.commit()

    def tearDown(self) -> None:
        self.manager.close()
        self._tmpdir.cleanup()

    def search(self, text: str, limit: int = 20):
        return self.searcher.search(compile_query(text), limit=limit)

    def names(self, text: str) -> set[str]:
        return {hit.document.filename for hit in self.search(text)}


class TestSearch(IndexTestCase):
    def test_operator_semantics(self) -> None:
        cases = {
            "vim": {"a.md", "b.md"},
            "tag:vim": {"a.md"},
            "title:emacs": {"b.md"},
            "author:alice": {"a.md"},
            "vim AND NOT tag:vim": {"b.md"},
            "vim AND emacs": {"b.md"},
            "vim FILTER author:alice": {"a.md"},
            "emacs OR cooking": {"b.md", "c.md"},
            "vim XOR editor": {"a.md"},
            "vim AND MAYBE pasta": {"a.md", "b.md"},
            "pasta SYNONYM noodles": {"c.md"},
            "vim ELITE emacs": {"a.md", "b.md"},
            '"rock and roll"': {"c.md"},
            "rock NEAR pasta": {"c.md"},
            "while PHRASE cooking": {"c.md"},
            "vim > 2021-01-01": {"a.md"},
            "vim < 2021-01-01": {"b.md"},
            "tag:editor RANGE 2019-01-01 2020-12-31": {"b.md"},
            "date:2021": {"a.md"},
            "filename:c": {"c.md"},
            "nothing": set(),
        }
        for text, expected in cases.items():
            with self.subTest(query=text):
                self.assertEqual(self.names(text), expected)

    def test_porter_stemming(self) -> None:
        self.assertEqual(self.names("cook"), {"c.md"})

    def test_hits_are_ranked_and_rebuilt(self) -> None:
        hits = self.search("tag:editor")
        self.assertEqual([hit.rank for hit in hits], [1, 2])
        self.assertGreaterEqual(hits[0].score, hits[1].score)
        (hit,) = [h for h in hits if h.document.filename == "a.md"]
        self.assertEqual(hit.document.title, "Vim tips")
        self.assertEqual(hit.document.identifier, "Vimtips")
        self.assertEqual(hit.document.full_path, "/notes/a.md")
        self.assertEqual(hit.document.body, "Use vim to edit text quickly.\n")

    def test_limit(self) -> None:
        self.assertEqual(len(self.search("vim", limit=1)), 1)

    def test_scaled_multiplies_score(self) -> None:
        plain = {h.document.filename: h.score for h in self.search("vim")}
        scaled = {h.document.filename: h.score for h in self.search("vim SCALED 2")}
        for name, score in plain.items():
            self.assertAlmostEqual(scaled[name], score * 2)

    def test_document_weight_boosts_rank(self) -> None:
        doc = parse(NOTES["b.md"], filename="b.md")
        self.indexer.update(dataclasses.replace(doc, weight=100))
        self.manager.commit()
        self.assertEqual(self.search("vim")[0].document.filename, "b.md")

    def test_inexpressible_query_is_rejected(self) -> None:
        with self.assertRaises(EngineRejected):
            self.search("vim SCALED lots")


class TestIndexMaintenance(IndexTestCase):
    def test_reindex_replaces_document(self) -> None:
        text = NOTES["a.md"].replace("Use vim to edit text quickly.", "Now about neovim.")
        self.indexer.update(parse(text, filename="a.md"))
        self.manager.commit()
        self.assertEqual(self.indexer.count(), 3)
        self.assertEqual(self.names("neovim"), {"a.md"})
        self.assertEqual(self.names("quickly"), set())

    def test_record_usage(self) -> None:
        updated = self.indexer.record_usage("a.md", views=1)
        self.assertEqual(updated.views, 1)
        self.indexer.record_usage("a.md", views=1, writes=2)
        stored = self.indexer.get("a.md")
        self.assertEqual((stored.views, stored.writes), (2, 2))

    def test_record_usage_unknown_document(self) -> None:
        self.assertIsNone(self.indexer.record_usage("missing.md", views=1))

    def test_counters_survive_reindex(self) -> None:
        self.indexer.record_usage("a.md", views=3, writes=1)
        self.indexer.update(parse(NOTES["a.md"], filename="a.md"))
        self.manager.commit()
        stored = self.indexer.get("a.md")
        self.assertEqual((stored.views, stored.writes), (3, 1))

    def test_delete(self) -> None:
        self.assertTrue(self.indexer.delete("c.md"))
        self.manager.commit()
        self.assertFalse(self.indexer.delete("c.md"))
        self.assertEqual(self.indexer.count(), 2)
        self.assertEqual(self.names("pasta"), set())

    def test_index_persists_across_managers(self) -> None:
        path = self.manager.db_path
        self.manager.close()
        with IndexManager(path) as manager:
            self.assertEqual(DocumentIndexer(manager).count(), 3)
        with self.assertRaises(RuntimeError):
            manager.get_connection()


if __name__ == "__main__":
    unittest.main()
