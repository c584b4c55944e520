"""Bulk ingestion of Markdown sources into the index."""

from __future__ import annotations

import glob
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from Mdq.core.errors import IngestError
from Mdq.core.models import Document
from Mdq.document.parser import parse
from Mdq.engine.db import IndexManager
from Mdq.engine.indexer import DocumentIndexer
from Mdq.utils.log import log


@dataclass(slots=True)
class IngestReport:
    """Outcome of one `update` run.

    Attributes:
        indexed: Files parsed and submitted to the index.
        failed: Files that could not be read or parsed.
        skipped: Files ignored because of their extension.
        failed_paths: Paths counted in `failed`, in processing order.
    """

    indexed: int = 0
    failed: int = 0
    skipped: int = 0
    failed_paths: list[str] = field(default_factory=list)


@dataclass(slots=True)
class IngestionService:
    """Read source files, parse them and submit them to the index.

    Files are processed one at a time; the whole run commits once.
    """

    manager: IndexManager
    indexer: DocumentIndexer
    extensions: tuple[str, ...] = (".md",)

    def update(self, patterns: Iterable[str]) -> IngestReport:
        """Index every file matched by paths or glob patterns.

        Args:
            patterns: Files, directories (walked recursively) or glob
                patterns; `~` is expanded and `**` matches nested
                directories.

        Returns:
            Counts of indexed, failed and skipped files.
        """
        report = IngestReport()
        for path in self.discover(patterns):
            if path.suffix.lower() not in self.extensions:
                log.debug("Skipping %s: extension not in %s", path, self.extensions)
                report.skipped += 1
                continue
            try:
                self.ingest_file(path)
            except (IngestError, UnicodeDecodeError, OSError) as e:
                log.error("Failed to ingest %s: %s", path, e)
                report.failed += 1
                report.failed_paths.append(str(path))
                continue
            report.indexed += 1

        self.manager.commit()
        log.info(
            "Indexed %d documents (failed %d, skipped %d)",
            report.indexed,
            report.failed,
            report.skipped,
        )
        return report

    def ingest_file(self, path: Path) -> Document:
        """Parse one file and submit it to the index without committing.

        Raises:
            IngestError: If the file is not a valid document.
            UnicodeDecodeError: If the file is not UTF-8.
            OSError: If the file cannot be read.
        """
        resolved = path.expanduser().resolve()
        text = resolved.read_text(encoding="utf-8")
        doc = parse(text, filename=resolved.name, full_path=str(resolved))
        self.indexer.update(doc)
        log.debug("Ingested %s as %r", resolved, doc.title)
        return doc

    def discover(self, patterns: Iterable[str]) -> Iterator[Path]:
        """Expand patterns into distinct file paths, in a stable order."""
        seen: set[Path] = set()
        for pattern in patterns:
            for path in _expand(pattern):
                key = path.resolve()
                if key in seen:
                    continue
                seen.add(key)
                yield path


def _expand(pattern: str) -> Sequence[Path]:
    expanded = os.path.expanduser(pattern)
    if glob.has_magic(expanded):
        matches = [Path(p) for p in sorted(glob.glob(expanded, recursive=True))]
        if not matches:
            log.warning("Pattern %s matched no files", pattern)
    else:
        matches = [Path(expanded)]

    out: list[Path] = []
    for path in matches:
        if path.is_dir():
            out.extend(sorted(p for p in path.rglob("*") if p.is_file()))
        else:
            # Missing files are reported by the read in `ingest_file`.
            out.append(path)
    return out
