"""
Metadata Extractor for embedded query annotations.

Query files may carry a comment block that pre-populates the request:

    -- @query-metadata
    -- purpose: Last month's sales ranking per user
    -- database: MySQL 8.0
    -- environment: production
    -- created_by: @query-designer
    -- created_at: 2026-01-15 20:46:00

Metadata is only an optimization to skip prompts. A missing or unparseable
block is never an error.
"""

import re
from typing import Optional

from .models import MetadataBlock

METADATA_MARKER = "@query-metadata"

RECOGNIZED_KEYS = ("purpose", "database", "environment", "created_by", "created_at")

_COMMENT_LINE = re.compile(r"^\s*--(?P<body>.*)$")
_KEY_VALUE = re.compile(r"^\s*(?P<key>[A-Za-z_][A-Za-z0-9_-]*)\s*:\s*(?P<value>.*?)\s*$")
_DATABASE_VALUE = re.compile(r"^\s*(?P<dialect>.+?)(?:\s+v?(?P<version>\d+(?:\.\d+)*))?\s*$")


def extract_metadata(raw_text: str) -> MetadataBlock:
    """
    Parse the ``@query-metadata`` block from query text.

    Args:
        raw_text: The query text as supplied by the operator

    Returns:
        MetadataBlock with recognized keys populated. Unknown keys are
        ignored; a marker without parseable lines yields an empty block
        flagged as malformed.
    """
    lines = raw_text.splitlines()

    start = None
    for index, line in enumerate(lines):
        match = _COMMENT_LINE.match(line)
        if match and match.group("body").strip().lower().startswith(METADATA_MARKER):
            start = index + 1
            break

    if start is None:
        return MetadataBlock()

    values: dict[str, str] = {}
    parsed_lines = 0
    for line in lines[start:]:
        match = _COMMENT_LINE.match(line)
        if not match:
            break
        pair = _KEY_VALUE.match(match.group("body"))
        if not pair:
            continue
        parsed_lines += 1
        key = pair.group("key").lower().replace("-", "_")
        value = pair.group("value")
        if key in RECOGNIZED_KEYS and value and key not in values:
            values[key] = value

    if parsed_lines == 0:
        return MetadataBlock(marker_found=True, malformed=True)

    return MetadataBlock(marker_found=True, **values)


def statement_body(raw_text: str) -> str:
    """
    Return the query text without its leading comment header.

    Leading ``--`` lines and blank lines are dropped; everything from the
    first statement line onwards is returned unchanged.
    """
    lines = raw_text.splitlines()
    for index, line in enumerate(lines):
        if line.strip() and not _COMMENT_LINE.match(line):
            return "\n".join(lines[index:]).strip()
    return ""


def parse_database(value: Optional[str]) -> tuple[Optional[str], Optional[str]]:
    """
    Split a database label into dialect and version.

    ``"MySQL 8.0"`` becomes ``("MySQL", "8.0")`` and ``"SQLite"`` becomes
    ``("SQLite", None)``.
    """
    if not value or not value.strip():
        return None, None
    match = _DATABASE_VALUE.match(value)
    if not match:
        return value.strip(), None
    return match.group("dialect").strip(), match.group("version")
