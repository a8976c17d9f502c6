# wikigrams/tokenizer.py
from __future__ import annotations

import re
from typing import Iterable, Iterator

from wikigrams import config

# Punctuation that separates unrelated clauses; n-grams never span these.
_SECTION_SPLIT_RE = re.compile(r"[,\"().?–;\n\r\t]")


def sections(plaintext: str) -> list[str]:
    """
    Split plaintext into independent runs of words.
    """
    return [s.strip() for s in _SECTION_SPLIT_RE.split(plaintext or "") if s.strip()]


def tokens(section: str) -> list[str]:
    return section.lower().split()


def ngrams(words: list[str], n: int = config.DEFAULT_NGRAM_SIZE) -> Iterator[str]:
    """
    Yield every window of `n` consecutive words, joined by NGRAM_SEPARATOR.
    """
    if n < 1:
        raise ValueError(f"N-gram size must be at least 1, got {n}")

    for i in range(len(words) - n + 1):
        yield config.NGRAM_SEPARATOR.join(words[i : i + n])


def page_ngrams(plaintext: str, n: int = config.DEFAULT_NGRAM_SIZE) -> Iterator[str]:
    for section in sections(plaintext):
        yield from ngrams(tokens(section), n)


def display_key(key: str) -> str:
    """
    Human-readable form of an n-gram key ("new\tyork" -> "new york").
    """
    return key.replace(config.NGRAM_SEPARATOR, " ")


def display_rows(rows: Iterable[tuple[str, int]]) -> Iterator[tuple[str, int]]:
    for key, count in rows:
        yield display_key(key), count
