# wikigrams/store.py
from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Mapping, Optional, Protocol, runtime_checkable

from wikigrams import config
from wikigrams.datatypes import Progress
from wikigrams.trie import Trie

logger = logging.getLogger(__name__)


class StoreCommitError(RuntimeError):
    """
    A batch could not be committed. Nothing from the batch (counts or
    progress) was kept, so the run can be restarted from the last checkpoint.
    """


@runtime_checkable
class FrequencyStore(Protocol):
    """
    Key -> cumulative count table plus a single resumability checkpoint.
    Uses structural subtyping - no inheritance required.
    """

    def get(self, key: str) -> int:
        """Return the stored count for `key` (0 when absent)."""
        ...

    def progress(self) -> Optional[Progress]:
        """Return the last checkpoint, or None if nothing was flushed yet."""
        ...

    def merge(self, counts: Mapping[str, int], progress: Progress) -> None:
        """Add `counts` to the table and replace the checkpoint, atomically."""
        ...

    def frequencies(self, cutoff: int = 0) -> Iterator[tuple[str, int]]:
        """Yield entries with count >= cutoff, count descending, key ascending."""
        ...

    def __len__(self) -> int: ...

    def close(self) -> None: ...


class _ClosingStore:
    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        pass


class MemoryFrequencyStore(_ClosingStore):
    """
    Dict-backed store for corpora that fit in memory. Nothing is persisted.
    """

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}
        self._progress: Optional[Progress] = None

    def get(self, key: str) -> int:
        return self._counts.get(key, 0)

    def progress(self) -> Optional[Progress]:
        return self._progress

    def merge(self, counts: Mapping[str, int], progress: Progress) -> None:
        for key, count in counts.items():
            self._counts[key] = self._counts.get(key, 0) + count
        self._progress = progress

    def frequencies(self, cutoff: int = 0) -> Iterator[tuple[str, int]]:
        rows = [(k, c) for k, c in self._counts.items() if c >= cutoff]
        rows.sort(key=lambda row: (-row[1], row[0]))
        yield from rows

    def __len__(self) -> int:
        return len(self._counts)


class TrieFrequencyStore(_ClosingStore):
    """
    Store backed by a Trie; shared prefixes keep large vocabularies compact.
    """

    def __init__(self) -> None:
        self.trie = Trie()
        self._progress: Optional[Progress] = None

    def get(self, key: str) -> int:
        return self.trie.frequency(key)

    def progress(self) -> Optional[Progress]:
        return self._progress

    def merge(self, counts: Mapping[str, int], progress: Progress) -> None:
        for key, count in counts.items():
            self.trie.insert(key, count)
        self._progress = progress

    def frequencies(self, cutoff: int = 0) -> Iterator[tuple[str, int]]:
        yield from self.trie.query(cutoff)

    def __len__(self) -> int:
        return len(self.trie)


SCHEMA = """
-- Term frequency table: cumulative count per n-gram key
CREATE TABLE IF NOT EXISTS term_frequency (
    term TEXT PRIMARY KEY,
    frequency INTEGER NOT NULL CHECK (frequency >= 0)
);

-- Progress table: a single checkpoint row, replaced on every flush
CREATE TABLE IF NOT EXISTS progress (
    id INTEGER PRIMARY KEY CHECK (id = 0),
    page_index INTEGER NOT NULL,
    title TEXT NOT NULL
);

CREATE UNIQUE INDEX IF NOT EXISTS idx_term_frequency_term ON term_frequency(term);
CREATE INDEX IF NOT EXISTS idx_term_frequency_frequency ON term_frequency(frequency);
"""


class SqliteFrequencyStore(_ClosingStore):
    """
    SQLite-backed store for corpora larger than memory.
    The connection is opened once and held until close().
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._conn = sqlite3.connect(self.path)
        self._conn.row_factory = sqlite3.Row
        try:
            self._conn.executescript(SCHEMA)
            self._conn.commit()
        except sqlite3.Error:
            self._conn.close()
            raise

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Commit on success, roll back and re-raise on any failure.
        """
        try:
            yield self._conn
            self._conn.commit()
        except Exception:
            self._conn.rollback()
            raise

    def get(self, key: str) -> int:
        row = self._conn.execute(
            "SELECT frequency FROM term_frequency WHERE term = ?", (key,)
        ).fetchone()
        return row["frequency"] if row else 0

    def progress(self) -> Optional[Progress]:
        row = self._conn.execute(
            "SELECT page_index, title FROM progress WHERE id = 0"
        ).fetchone()
        return Progress(page_index=row["page_index"], title=row["title"]) if row else None

    def merge(self, counts: Mapping[str, int], progress: Progress) -> None:
        try:
            with self.transaction() as conn:
                conn.executemany(
                    """INSERT INTO term_frequency (term, frequency) VALUES (?, ?)
                       ON CONFLICT(term) DO UPDATE
                       SET frequency = frequency + excluded.frequency""",
                    counts.items(),
                )
                conn.execute(
                    """INSERT OR REPLACE INTO progress (id, page_index, title)
                       VALUES (0, ?, ?)""",
                    (progress.page_index, progress.title),
                )
        except (sqlite3.Error, OSError) as exc:
            raise StoreCommitError(
                f"Could not commit batch ending at page {progress.page_index} "
                f"to {self.path}: {exc}"
            ) from exc

    def frequencies(self, cutoff: int = 0) -> Iterator[tuple[str, int]]:
        cursor = self._conn.execute(
            """SELECT term, frequency FROM term_frequency
               WHERE frequency >= ? ORDER BY frequency DESC, term ASC""",
            (cutoff,),
        )
        for row in cursor:
            yield row["term"], row["frequency"]

    def __len__(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM term_frequency").fetchone()[0]

    def close(self) -> None:
        self._conn.close()


BACKENDS = {
    "dict": MemoryFrequencyStore,
    "trie": TrieFrequencyStore,
}


def open_store(
    path: Path | str | None = None, backend: str = config.DEFAULT_BACKEND
) -> FrequencyStore:
    """
    Open a persistent SQLite store when `path` is given, otherwise an
    in-memory store of the requested backend ("dict" or "trie").
    """
    if path is not None:
        logger.debug("Opening frequency store at %s", path)
        return SqliteFrequencyStore(path)

    try:
        return BACKENDS[backend]()
    except KeyError:
        raise ValueError(
            f"Unknown backend {backend!r}; expected one of {sorted(BACKENDS)}"
        ) from None
