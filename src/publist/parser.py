"""Permissive BibTeX scanner.

The scanner is deliberately forgiving: it extracts whatever
``@type{key, name = value, ...}`` blocks it can recognise and silently skips
everything else (stray text, comments, preambles, truncated entries). It
never raises a structural error.

Supported value shapes:

- ``{text}`` with at most one nested ``{...}`` group. Deeper nesting is
  truncated at the first unmatched inner brace.
- ``"text"``
- bare integers, e.g. ``year = 2020``
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from .exceptions import FileOperationError
from .models import Entry
from .types import FieldMap

logger = logging.getLogger(__name__)

# Block types that never describe a publication
IGNORED_TYPES = frozenset({"comment", "preamble", "string"})

# An "@" that is the first non-blank character of a line starts a block
_BLOCK_START = re.compile(r"^[ \t]*@", re.MULTILINE)
_BLOCK_HEAD = re.compile(r"@\s*(\w+)\s*\{", re.ASCII)
_FIELD_NAME = re.compile(r"\s*([A-Za-z_][\w\-:.]*)\s*=\s*", re.ASCII)
_INTEGER = re.compile(r"\d+", re.ASCII)


@dataclass(frozen=True, slots=True)
class EntrySpan:
    """An entry and the offsets of its ``@`` marker and closing brace."""

    entry: Entry
    start: int
    close: int


def parse(text: str) -> list[Entry]:
    """Parse bibliography text into entries.

    Args:
        text: Raw BibTeX-like text

    Returns:
        Entries in source order; blocks that do not look like entries are skipped
    """
    entries = [span.entry for span in iter_entry_spans(text)]

    logger.debug("Parsed %d entries", len(entries))
    return entries


def parse_file(bib_path: Path) -> list[Entry]:
    """Read a UTF-8 bibliography file and parse it.

    Raises:
        FileOperationError: If the file is missing, unreadable or not UTF-8
    """
    logger.debug("Parsing bibliography file: %s", bib_path)

    try:
        text = bib_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise FileOperationError(f"Bibliography file not found: {bib_path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise FileOperationError(f"Failed to read {bib_path}: {e}") from e

    return parse(text)


def iter_entry_spans(text: str) -> Iterator[EntrySpan]:
    """Yield each entry together with its position in ``text``."""
    for start, block in _split_blocks(text):
        parsed = _parse_block(block)
        if parsed is not None:
            entry, close = parsed
            yield EntrySpan(entry=entry, start=start, close=start + close)


def _split_blocks(text: str) -> Iterator[tuple[int, str]]:
    """Yield ``(offset, block)`` from one top-level ``@`` marker to the next."""
    starts = [match.end() - 1 for match in _BLOCK_START.finditer(text)]
    for index, start in enumerate(starts):
        end = starts[index + 1] if index + 1 < len(starts) else len(text)
        yield start, text[start:end]


def _parse_block(block: str) -> tuple[Entry, int] | None:
    head = _BLOCK_HEAD.match(block)
    if head is None:
        return None

    entry_type = head.group(1).lower()
    if entry_type in IGNORED_TYPES:
        return None

    # The entry must be closed; a truncated block is dropped
    close = _find_closing_brace(block, head.end() - 1)
    if close is None:
        return None

    key, comma, body = block[head.end() : close].partition(",")
    key = key.strip()
    if not comma or not key or "}" in key or "{" in key:
        return None

    return Entry(type=entry_type, key=key, fields=_parse_fields(body)), close


def _parse_fields(body: str) -> FieldMap:
    """Extract ``name = value`` pairs left to right; later names overwrite earlier ones."""
    fields: FieldMap = {}
    pos = 0
    length = len(body)

    while pos < length:
        match = _FIELD_NAME.match(body, pos)
        if match is None:
            pos = _skip_past_comma(body, pos)
            continue

        name = match.group(1).lower()
        value, pos = _read_value(body, match.end())
        if value is None:
            pos = _skip_past_comma(body, pos)
            continue

        fields[name] = value.strip()

    return fields


def _read_value(body: str, pos: int) -> tuple[str | None, int]:
    """Read one value starting at ``pos``.

    Returns:
        ``(value, next_position)``; ``value`` is ``None`` when nothing value-shaped starts here
    """
    if pos >= len(body):
        return None, pos

    opener = body[pos]
    if opener == "{":
        return _read_braced(body, pos)
    if opener == '"':
        close = body.find('"', pos + 1)
        if close == -1:
            return None, len(body)
        return body[pos + 1 : close], close + 1

    number = _INTEGER.match(body, pos)
    if number is not None:
        return number.group(0), number.end()
    return None, pos


def _read_braced(body: str, pos: int) -> tuple[str | None, int]:
    """Read a brace-delimited value allowing a single nested group.

    A second level of nesting truncates the value at that brace; scanning
    resumes after the balanced end of the whole value.
    """
    depth = 0
    truncated_at: int | None = None

    for index in range(pos, len(body)):
        char = body[index]
        if char == "{":
            depth += 1
            if depth == 3 and truncated_at is None:
                truncated_at = index
        elif char == "}":
            depth -= 1
            if depth == 0:
                end = index if truncated_at is None else truncated_at
                return body[pos + 1 : end], index + 1

    # Unbalanced until the end of the entry
    return None, len(body)


def _find_closing_brace(text: str, pos: int) -> int | None:
    """Return the index of the brace closing the one at ``pos``, or ``None``."""
    depth = 0
    for index in range(pos, len(text)):
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return None


def _skip_past_comma(body: str, pos: int) -> int:
    """Advance past the next comma outside braces and quotes."""
    depth = 0
    in_quotes = False
    for index in range(pos, len(body)):
        char = body[index]
        if char == '"' and depth == 0:
            in_quotes = not in_quotes
        elif in_quotes:
            continue
        elif char == "{":
            depth += 1
        elif char == "}":
            depth = max(depth - 1, 0)
        elif char == "," and depth == 0:
            return index + 1
    return len(body)
