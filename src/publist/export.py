"""Commit inferred links to a BibTeX file.

New ``doi``/``url`` lines are spliced into the original text of each entry,
just before its closing brace. Nothing else in the file is rewritten, so
``@string`` definitions, comments, macro values and deeply nested braces
survive untouched.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

import bibtexparser

from .exceptions import FileOperationError, InvalidDataError
from .links import LINK_FIELDS, enrich
from .parser import EntrySpan, iter_entry_spans

logger = logging.getLogger(__name__)

DEFAULT_INDENT = "  "

_FIELD_INDENT = re.compile(r"\n([ \t]+)\S")


@dataclass(slots=True)
class LinkExportReport:
    """Summary of links added to a bibliography."""

    total_entries: int = 0
    added: dict[str, list[str]] = field(default_factory=dict)


def add_links_to_bibtex(text: str) -> tuple[str, LinkExportReport]:
    """Infer links for every entry in ``text`` and splice them into it.

    Only fields the entry does not have at all are added; an existing field,
    even an empty one, is left as written.

    Returns:
        ``(updated_text, report)``
    """
    spans = list(iter_entry_spans(text))
    report = LinkExportReport(total_entries=len(spans))
    insertions: list[tuple[int, int, str]] = []

    for span in spans:
        present = set(span.entry.fields)
        enrich(span.entry)
        new_fields = [
            name for name in LINK_FIELDS if name not in present and span.entry.has(name)
        ]
        if not new_fields:
            continue

        report.added[span.entry.key] = new_fields
        insertions.append(_splice(text, span, new_fields))

    # Apply from the end so earlier offsets stay valid
    for cut, close, piece in reversed(insertions):
        text = text[:cut] + piece + text[close:]

    return text, report


def _splice(text: str, span: EntrySpan, names: list[str]) -> tuple[int, int, str]:
    """Return ``(cut, close, piece)``: ``piece`` replaces ``text[cut:close]``.

    The new fields go after the last non-blank character before the closing
    brace, using the indentation of the entry's own fields.
    """
    stripped = text[span.start : span.close].rstrip()
    cut = span.start + len(stripped)
    trailing = text[cut : span.close] or "\n"

    indent_match = _FIELD_INDENT.search(text, span.start, span.close)
    indent = indent_match.group(1) if indent_match else DEFAULT_INDENT

    had_trailing_comma = stripped.endswith(",")
    lines = ",".join(
        f"\n{indent}{name} = {{{span.entry.get(name)}}}" for name in names
    )
    piece = ("" if had_trailing_comma else ",") + lines
    if had_trailing_comma:
        piece += ","
    return cut, span.close, piece + trailing


def _check_structure(original: str, updated: str) -> None:
    """Refuse output that bibtexparser reads worse than the input."""
    before = bibtexparser.parse_string(original)
    after = bibtexparser.parse_string(updated)
    if len(after.entries) != len(before.entries) or len(after.failed_blocks) > len(
        before.failed_blocks
    ):
        raise InvalidDataError(
            "Refusing to write: adding links changed how the bibliography parses "
            f"({len(before.entries)} -> {len(after.entries)} entries, "
            f"{len(before.failed_blocks)} -> {len(after.failed_blocks)} failed blocks)"
        )


def enrich_bibtex_file(
    bib_path: Path, output_path: Path | None = None, *, dry_run: bool = False
) -> LinkExportReport:
    """Add inferred ``doi``/``url`` fields to a bibliography file.

    Args:
        bib_path: Source ``.bib`` file
        output_path: Destination; defaults to ``bib_path`` (in place)
        dry_run: When ``True``, report changes without writing to disk

    Returns:
        :class:`LinkExportReport` describing the added fields

    Raises:
        FileOperationError: If the file cannot be read or written
        InvalidDataError: If the updated text would no longer parse cleanly
    """
    try:
        original = bib_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise FileOperationError(f"Bibliography file not found: {bib_path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise FileOperationError(f"Failed to read {bib_path}: {e}") from e

    updated, report = add_links_to_bibtex(original)

    target = output_path or bib_path
    if dry_run or (not report.added and target == bib_path):
        return report

    _check_structure(original, updated)

    try:
        with open(target, "w", encoding="utf-8") as bib_file:
            bib_file.write(updated)
    except OSError as e:
        raise FileOperationError(f"Failed to write {target}: {e}") from e

    logger.info("Wrote %d enriched entries to %s", len(report.added), target)
    return report
