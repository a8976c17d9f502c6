# wikigrams/datatypes.py
from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import Iterator

from wikigrams import config
from wikigrams.markup import (
    is_disambiguation_title,
    is_redirect,
    is_special_title,
    normalize,
)


@dataclass(frozen=True, slots=True)
class SectionNode:
    """
    One node of a page's heading tree.
    The root has an empty name and heading and holds the text before the
    first heading; every other node holds the body of one heading.
    """

    name: str
    heading: str  # exact heading line, e.g. "==History==\n"
    content: str
    children: tuple[SectionNode, ...] = ()

    def markup(self) -> str:
        """
        Rebuild the markup this node was parsed from.
        """
        return self.heading + self.content + "".join(c.markup() for c in self.children)

    def walk(self, depth: int = 0) -> Iterator[tuple[int, SectionNode]]:
        """
        Yield (depth, node) for this node and its descendants, depth-first.
        """
        yield depth, self
        for child in self.children:
            yield from child.walk(depth + 1)

    def plaintext(self, remove_parentheticals: bool = False) -> str:
        return normalize(self.content, remove_parentheticals)


@dataclass(frozen=True, slots=True)
class Progress:
    """
    Checkpoint written with every flush: how many pages of the source are
    folded into the store, and the title of the last one.
    """

    page_index: int
    title: str

    @property
    def completed(self) -> bool:
        return self.title == config.COMPLETED_MARKER


@dataclass(frozen=True, eq=False)
class Page:
    """
    A single page read from a dump, immutable once built.
    Derived fields are computed on first access and cached on the instance.
    """

    title: str
    raw_text: str = ""
    id: int | None = None
    remove_parentheticals: bool = field(default=False, kw_only=True)

    @classmethod
    def from_plaintext(cls, title: str, plaintext: str) -> Page:
        """
        Build a page whose markup was already stripped (e.g. read back from
        an exchange file).
        """
        page = cls(title=title)
        page.__dict__["plaintext"] = plaintext
        return page

    @cached_property
    def plaintext(self) -> str:
        return normalize(self.raw_text, self.remove_parentheticals)

    @cached_property
    def is_redirect(self) -> bool:
        return is_redirect(self.raw_text)

    @cached_property
    def is_special_page(self) -> bool:
        return is_special_title(self.title)

    @cached_property
    def is_disambiguation(self) -> bool:
        return is_disambiguation_title(self.title)

    @property
    def is_article(self) -> bool:
        return not (self.is_redirect or self.is_special_page or self.is_disambiguation)

    @cached_property
    def sections(self) -> SectionNode:
        # imported here, sections imports SectionNode from this module
        from wikigrams.sections import parse_sections

        return parse_sections("", self.raw_text, config.DEFAULT_SECTION_LEVEL)

    def has_section(self, name: str) -> bool:
        """
        Whether a top-level section (e.g. "==French==" on Wiktionary) exists.
        """
        return any(child.name == name for child in self.sections.children)
