# wikigrams/dump.py
# Streams pages out of a MediaWiki XML dump (.xml or .xml.bz2).
from __future__ import annotations

import bz2
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import IO, Iterable, Iterator, Optional

from wikigrams import config
from wikigrams.datatypes import Page
from wikigrams.exchange import is_exchange_file, read_pages

logger = logging.getLogger(__name__)


def _local(tag: str) -> str:
    """
    Drop the "{namespace}" prefix that dumps put on every element.
    """
    return tag.rsplit("}", 1)[-1]


def _open_dump(path: Path) -> IO[bytes]:
    if path.name.lower().endswith(".bz2"):
        return bz2.open(path, "rb")
    return open(path, "rb")


def _child_text(elem: ET.Element, name: str) -> Optional[str]:
    for child in elem.iter():
        if _local(child.tag) == name:
            return child.text
    return None


def read_dump(
    path: Path | str, *, remove_parentheticals: bool = False
) -> Iterator[Page]:
    """
    Yield every <page> of the dump in document order.
    Elements are cleared once read, so memory stays flat on huge dumps.
    """
    path = Path(path)
    count = 0
    root = None
    with _open_dump(path) as stream:
        for event, elem in ET.iterparse(stream, events=("start", "end")):
            if event == "start":
                if root is None:
                    root = elem
                continue
            if _local(elem.tag) != "page":
                continue

            raw_id = _child_text(elem, "id")
            page = Page(
                title=_child_text(elem, "title") or "",
                raw_text=_child_text(elem, "text") or "",
                id=int(raw_id) if raw_id and raw_id.strip().isdigit() else None,
                remove_parentheticals=remove_parentheticals,
            )
            # finished pages stay attached to <mediawiki> unless the root lets go
            root.clear()
            count += 1
            yield page

    logger.debug("Read %d pages from %s", count, path)


def articles(pages: Iterable[Page]) -> Iterator[Page]:
    """
    Keep real articles: no redirects, special pages or disambiguation pages.
    """
    return (page for page in pages if page.is_article)


def find_page(pages: Iterable[Page], title: str) -> Optional[Page]:
    """
    First page whose title matches `title`, ignoring case.
    """
    wanted = title.casefold()
    return next((page for page in pages if page.title.casefold() == wanted), None)


def is_dump(path: Path | str) -> bool:
    return str(path).lower().endswith(config.DUMP_SUFFIXES)


def open_pages(
    path: Path | str, *, remove_parentheticals: bool = False
) -> Iterator[Page]:
    """
    Pages from either a dump (articles only) or an exchange file.
    """
    if is_dump(path):
        return articles(read_dump(path, remove_parentheticals=remove_parentheticals))
    if is_exchange_file(path):
        return read_pages(path)
    raise ValueError(
        f"Unsupported input {str(path)!r}; expected one of "
        f"{', '.join(config.DUMP_SUFFIXES + (config.EXCHANGE_SUFFIX,))}"
    )
