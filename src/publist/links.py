"""Infer DOI and URL links for entries that do not carry them.

Inference is purely textual: each rule searches a few candidate fields of
the entry for a source-specific identifier and builds the canonical DOI
and/or URL from it. Rules run in a fixed priority order and only fill in
values that are still missing.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from .models import Entry
from .types import LinkResult

logger = logging.getLogger(__name__)

LINK_FIELDS = ("doi", "url")


@dataclass(frozen=True, slots=True)
class LinkRule:
    """One step of the inference cascade.

    Attributes:
        name: Short rule name used in log messages
        pattern: Regular expression; the last group holds the identifier
        sources: Entry attributes searched in order (``venue``, ``key`` or a field name)
        build: Turns the identifier into a partial link result
    """

    name: str
    pattern: re.Pattern[str]
    sources: tuple[str, ...]
    build: Callable[[str], LinkResult]

    def search(self, entry: Entry) -> LinkResult | None:
        """Return the partial result for the first matching source, if any."""
        for source in self.sources:
            text = _source_text(entry, source)
            if not text:
                continue
            match = self.pattern.search(text)
            if match is not None:
                return self.build(match.group(match.lastindex or 0))
        return None


def _arxiv(identifier: str) -> LinkResult:
    return {
        "doi": f"10.48550/arXiv.{identifier}",
        "url": f"https://arxiv.org/abs/{identifier}",
    }


def _osf(identifier: str) -> LinkResult:
    doi = f"10.31234/osf.io/{identifier}"
    return {"doi": doi, "url": f"https://doi.org/{doi}"}


def _biorxiv(identifier: str) -> LinkResult:
    return {
        "doi": f"10.1101/{identifier}",
        "url": f"https://www.biorxiv.org/content/10.1101/{identifier}",
    }


def _acl(identifier: str) -> LinkResult:
    return {"url": f"https://aclanthology.org/{identifier}/"}


def _doi(identifier: str) -> LinkResult:
    return {"doi": identifier, "url": f"https://doi.org/{identifier}"}


# Priority order matters: preprint servers first, the generic DOI pattern last
RULES: tuple[LinkRule, ...] = (
    LinkRule(
        name="arxiv",
        pattern=re.compile(
            r"arXiv[:\s]+(?:preprint\s+)?(?:arXiv[:\s]+)?(\d{4}\.\d{4,5}(?:v\d+)?)",
            re.IGNORECASE,
        ),
        sources=("venue", "note", "url"),
        build=_arxiv,
    ),
    LinkRule(
        name="osf",
        pattern=re.compile(r"osf\.io/([A-Za-z0-9]+)", re.IGNORECASE),
        sources=("doi", "url", "venue"),
        build=_osf,
    ),
    LinkRule(
        name="biorxiv",
        pattern=re.compile(
            r"bioRxiv[:\s]+(?:preprint\s+)?(?:bioRxiv[:\s]+)?(\d{4}\.\d{2}\.\d{2}\.\d+)",
            re.IGNORECASE,
        ),
        sources=("venue", "note"),
        build=_biorxiv,
    ),
    LinkRule(
        name="acl",
        pattern=re.compile(r"\b(\d{4}\.\w+-\w+\.\d+)\b"),
        sources=("key", "url"),
        build=_acl,
    ),
    LinkRule(
        name="doi",
        pattern=re.compile(r"(?:doi[:\s]+)?(10\.\d{4,}/[^\s,{}]+)", re.IGNORECASE),
        sources=("venue", "note"),
        build=_doi,
    ),
)


def _source_text(entry: Entry, source: str) -> str:
    if source == "venue":
        return entry.venue
    if source == "key":
        return entry.key
    return entry.get(source)


def has_links(entry: Entry) -> bool:
    """Return ``True`` once both ``doi`` and ``url`` are non-empty."""
    return all(entry.has(name) for name in LINK_FIELDS)


def merge_if_absent(entry: Entry, result: LinkResult) -> list[str]:
    """Copy link values onto the entry where the entry has none.

    A field counts as absent when it is missing or holds an empty string.
    Existing values are never overwritten.

    Returns:
        Names of the fields that were written
    """
    written: list[str] = []
    for name in LINK_FIELDS:
        value = result.get(name)
        if value and not entry.has(name):
            entry.fields[name] = value
            written.append(name)
    return written


def enrich(entry: Entry, rules: Iterable[LinkRule] = RULES) -> Entry:
    """Fill in missing ``doi``/``url`` fields from identifiers found in the entry.

    Rules are tried in order until both fields are set. The entry is
    modified in place and returned.
    """
    for rule in rules:
        if has_links(entry):
            break
        result = rule.search(entry)
        if result is None:
            continue
        written = merge_if_absent(entry, result)
        if written:
            logger.debug("Rule %s set %s for entry %s", rule.name, ", ".join(written), entry.key)
    return entry


def enrich_all(entries: Iterable[Entry]) -> list[Entry]:
    """Enrich every entry in order and return them as a list."""
    return [enrich(entry) for entry in entries]
