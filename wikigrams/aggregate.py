# wikigrams/aggregate.py
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from itertools import islice
from typing import Iterable, Optional

from wikigrams import config
from wikigrams.datatypes import Page, Progress
from wikigrams.store import FrequencyStore, StoreCommitError, open_store
from wikigrams.tokenizer import page_ngrams

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AggregateResult:
    """
    Summary of one aggregation run.
    """

    pages_skipped: int  # already folded into the store by an earlier run
    pages_processed: int
    flushes: int
    last_progress: Optional[Progress]


def aggregate(
    pages: Iterable[Page],
    store: FrequencyStore,
    n: int = config.DEFAULT_NGRAM_SIZE,
    batch_size: int = config.DEFAULT_BATCH_SIZE,
) -> AggregateResult:
    """
    Count n-grams of `pages` into `store`, flushing every `batch_size` pages.

    - Resumes after the store's checkpoint: that many pages are skipped from
      the head of `pages`, which must come in the same order on every run.
    - Each flush adds the batch counts and writes the new checkpoint in one
      atomic store operation, so an interrupted run loses at most one batch
      and never counts a page twice.
    - Raises StoreCommitError if a flush fails; rerunning resumes from the
      last committed checkpoint.
    """
    if n < 1:
        raise ValueError(f"N-gram size must be at least 1, got {n}")
    if batch_size < 1:
        raise ValueError(f"Batch size must be at least 1, got {batch_size}")

    checkpoint = store.progress()
    skipped = checkpoint.page_index if checkpoint else 0
    if skipped:
        logger.info("Resuming after page %d (%s)", skipped, checkpoint.title)

    counts: Counter[str] = Counter()
    page_index = skipped
    pending = 0
    flushes = 0
    last_progress = checkpoint

    def flush(title: str) -> None:
        """
        Fold the pending batch into the store, then start a new one.
        """
        nonlocal counts, pending, flushes, last_progress
        progress = Progress(page_index=page_index, title=title)
        try:
            store.merge(counts, progress)
        except StoreCommitError:
            logger.error(
                "Batch ending at page %d was not committed; a rerun resumes after page %d",
                page_index,
                last_progress.page_index if last_progress else 0,
            )
            raise

        logger.info("Committed %d (%s), %d distinct n-grams", page_index, title, len(counts))
        counts = Counter()
        pending = 0
        flushes += 1
        last_progress = progress

    for page in islice(pages, skipped, None):
        counts.update(page_ngrams(page.plaintext, n))
        page_index += 1
        pending += 1

        if pending >= batch_size:
            flush(page.title)

    if pending:
        flush(config.COMPLETED_MARKER)

    return AggregateResult(
        pages_skipped=skipped,
        pages_processed=page_index - skipped,
        flushes=flushes,
        last_progress=last_progress,
    )


def query(
    store: FrequencyStore, cutoff: int = config.DEFAULT_CUTOFF
) -> list[tuple[str, int]]:
    """
    Entries with count >= cutoff, count descending, ties by ascending key.
    """
    return list(store.frequencies(cutoff))


def count_ngrams(
    pages: Iterable[Page],
    n: int = config.DEFAULT_NGRAM_SIZE,
    cutoff: int = config.DEFAULT_CUTOFF,
    backend: str = config.DEFAULT_BACKEND,
) -> list[tuple[str, int]]:
    """
    Single in-memory pass over `pages` for corpora small enough to fit.
    """
    with open_store(backend=backend) as store:
        aggregate(pages, store, n=n, batch_size=config.DEFAULT_BATCH_SIZE)
        return query(store, cutoff)
