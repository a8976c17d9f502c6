# wikigrams/config.py
from __future__ import annotations

# N-gram counting configuration
DEFAULT_NGRAM_SIZE = 1
DEFAULT_CUTOFF = 10

# Tokens are split on whitespace, so a tab can never occur inside a token.
NGRAM_SEPARATOR = "\t"

# Frequency store configuration
DEFAULT_BATCH_SIZE = 10_000  # pages held in memory between flushes
DEFAULT_BACKEND = "dict"  # in-memory backend when no store path is given
COMPLETED_MARKER = "[COMPLETED]"

# Markup configuration
DEFAULT_SECTION_LEVEL = 2  # "==History==" is the first level of a page
TRAILING_SECTIONS = ("See also", "References", "Further reading", "External links")
NON_CONTENT_NAMESPACES = ("Category", "File", "Image")

# Input / output files
DUMP_SUFFIXES = (".xml", ".xml.bz2")
EXCHANGE_SUFFIX = ".jsonl"
