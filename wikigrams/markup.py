# wikigrams/markup.py
from __future__ import annotations

import re

from wikigrams import config

# NOTE:
# Page predicates

_REDIRECT_RE = re.compile(r"#REDIRECT", flags=re.IGNORECASE)
_SPECIAL_PAGE_RE = re.compile(r"^[a-z]+:", flags=re.IGNORECASE)


def is_redirect(text: str) -> bool:
    """
    True when the raw page text is a redirect to another page.
    """
    return bool(_REDIRECT_RE.match(text or ""))


def is_special_title(title: str) -> bool:
    """
    True for namespaced titles such as "Category:Foo", "File:foo.jpg" or
    "Wikipedia:Something".
    """
    return bool(_SPECIAL_PAGE_RE.match(title or ""))


def is_disambiguation_title(title: str) -> bool:
    return "(disambiguation)" in (title or "")


# NOTE:
# Normalization rules

_PARENS_RE = re.compile(r"\([^()]*\)")

_TRAILING_SECTION_RE = re.compile(
    r"={1,6}[ \t]*(?:"
    + "|".join(re.escape(name) for name in config.TRAILING_SECTIONS)
    + r")[ \t]*={1,6}",
    flags=re.IGNORECASE,
)

_AS_OF_RE = re.compile(r"\{\{as of\|(\d+)(?:\|[^{}]*)?\}\}", flags=re.IGNORECASE)

_NAMESPACES = "|".join(config.NON_CONTENT_NAMESPACES)

_BLOCK = re.MULTILINE | re.DOTALL

# (pattern, replacement) pairs, applied in order, each one to its fixed point
RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    # <ref>a reference</ref>, <ref name="x" />
    (re.compile(r"<ref[^>/]*/>|<ref[^>/]*>.*?</ref>", _BLOCK), ""),
    # {{l|en|target|...}}
    (re.compile(r"\{\{l\|[^|{}]+\|([^|{}]+)(?:\|[^|{}]*)*\}\}", _BLOCK), r"\1"),
    # innermost {{templates}}
    (re.compile(r"\{\{[^{}]*\}\}", _BLOCK), ""),
    # {| tables |}
    (re.compile(r"\{\|.*?\|\}", _BLOCK), ""),
    # [[Awakenings (book)|Awakenings]], [[Awakenings]]
    (
        re.compile(
            r"\[\[(?!(?i:" + _NAMESPACES + r"):)(?:[^|\[\]]+?\|)?([^\[\]]+?)\]\]",
            _BLOCK,
        ),
        r"\1",
    ),
    # [[Category:Foo]], [[File:foo.jpg|a caption]]
    (re.compile(r"\[\[(?i:" + _NAMESPACES + r"):[^\[\]]+?\]\]", _BLOCK), ""),
    # [http://foo click here], [http://foo "click here"]
    (re.compile(r"\[[^\s\[\]]+ ([\"']*)([^\"\[\]]+)\1\]", _BLOCK), r"\2"),
    # [http://foo]
    (re.compile(r"\[[^ \[\]]+\]", _BLOCK), ""),
    # <!-- comments -->
    (re.compile(r"<!--.*?-->", _BLOCK), ""),
    # <tags>
    (re.compile(r"<[^>]*>", _BLOCK), ""),
    # ===Headings===
    (re.compile(r"(={1,6})([^'=\n]+)\1"), r"\2"),
    # ''italic'', '''bold'''
    (re.compile(r"('{2,5})(.*?)\1"), r"\2"),
    # * lists, : quotes
    (re.compile(r"^[ \t]*[*:] (.+)$", re.MULTILINE), r"\1"),
)

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")
_INLINE_SPACE_RE = re.compile(r"[ \t]+")


def _fixed_point(pattern: re.Pattern[str], replacement: str, text: str) -> str:
    """
    Substitute until the pattern no longer matches.
    Every match removes at least one non-whitespace character, so this ends.
    """
    while True:
        text, count = pattern.subn(replacement, text)
        if count == 0:
            return text


def _truncate_trailing_sections(text: str) -> str:
    """
    Cut the text at whichever trailing boilerplate heading comes first.
    """
    match = _TRAILING_SECTION_RE.search(text)
    return text[: match.start()] if match else text


def _paragraphs(text: str) -> str:
    lines = (
        _INLINE_SPACE_RE.sub(" ", line).strip() for line in _LINE_BREAK_RE.split(text)
    )
    return "\n\n".join(line for line in lines if line)


def _normalize_once(text: str, remove_parentheticals: bool) -> str:
    if remove_parentheticals:
        text = _fixed_point(_PARENS_RE, "", text)

    text = _truncate_trailing_sections(text)
    text = _AS_OF_RE.sub(r"as of \1", text)

    for pattern, replacement in RULES:
        text = _fixed_point(pattern, replacement, text)

    return _paragraphs(text)


def normalize(raw: str, remove_parentheticals: bool = False) -> str:
    """
    Best-effort conversion of wiki markup to plaintext.

    - Optionally peels balanced parentheticals from the inside out.
    - Drops everything from the first "See also", "References", "Further reading"
      or "External links" heading onward.
    - Applies RULES in order, each until it stops matching.
    - Returns trimmed, non-empty lines joined by blank lines.

    Unbalanced or malformed markup is left in place rather than rejected.
    The whole pass is repeated until its output is stable, which makes
    normalize(normalize(x)) == normalize(x).
    """
    if not raw or not raw.strip():
        return ""

    text = raw
    while True:
        result = _normalize_once(text, remove_parentheticals)
        if result == text:
            return result
        text = result
