# wikigrams/exchange.py
# Plaintext exchange format: one JSON object {"title", "plaintext"} per line,
# so a corpus can be re-counted without parsing the dump again.
from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Iterator

from wikigrams import config
from wikigrams.datatypes import Page


def is_exchange_file(path: Path | str) -> bool:
    return str(path).lower().endswith(config.EXCHANGE_SUFFIX)


def write_pages(pages: Iterable[Page], path: Path | str) -> int:
    """
    Stream `pages` to `path` and return how many were written.
    """
    written = 0
    with open(path, "w", encoding="utf-8") as out_file:
        for page in pages:
            record = {"title": page.title, "plaintext": page.plaintext}
            # ASCII escapes keep any string (even lone surrogates) round-trippable
            out_file.write(json.dumps(record) + "\n")
            written += 1
    return written


def read_pages(path: Path | str) -> Iterator[Page]:
    """
    Yield pages back from an exchange file, one line at a time.
    """
    with open(path, "r", encoding="utf-8") as in_file:
        for line in in_file:
            if not line.strip():
                continue
            record = json.loads(line)
            yield Page.from_plaintext(record["title"], record["plaintext"])
