# wikigrams/sections.py
from __future__ import annotations

import re
from functools import lru_cache

from wikigrams import config
from wikigrams.datatypes import SectionNode


@lru_cache(maxsize=None)
def _heading_re(level: int) -> re.Pattern[str]:
    """
    Headings of exactly `level` equals signs on both sides, at the start of a
    line, followed by the line break(s) that end them.
    """
    return re.compile(
        rf"^={{{level}}}([^=]+?)={{{level}}}[\r\n]+", flags=re.MULTILINE
    )


def parse_sections(
    title: str, markup: str, level: int = config.DEFAULT_SECTION_LEVEL
) -> SectionNode:
    """
    Build the heading tree of `markup`.

    Headings at `level` split the text; each heading's body (up to the next
    heading at the same level) is parsed again at `level + 1`. Text before
    the first heading stays on the returned node. No text is dropped:
    SectionNode.markup() gives back `markup` unchanged.
    """
    if level < 2:
        raise ValueError(f"Section level must be at least 2, got {level}")

    matches = list(_heading_re(level).finditer(markup))
    if not matches:
        return SectionNode(name=title, heading="", content=markup)

    children: list[SectionNode] = []
    for i, match in enumerate(matches):
        body_end = matches[i + 1].start() if i + 1 < len(matches) else len(markup)
        child = parse_sections(
            match.group(1).strip(), markup[match.end() : body_end], level + 1
        )
        children.append(
            SectionNode(
                name=child.name,
                heading=match.group(0),
                content=child.content,
                children=child.children,
            )
        )

    return SectionNode(
        name=title,
        heading="",
        content=markup[: matches[0].start()],
        children=tuple(children),
    )
