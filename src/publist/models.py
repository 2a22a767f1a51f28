"""Record types shared by the BibTeX and JSON publication sources."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .types import FieldMap, PublicationRecord

_AUTHOR_SEPARATOR = re.compile(r"\s+and\s+")


@dataclass(slots=True)
class Entry:
    """One bibliography record extracted from BibTeX text."""

    type: str
    key: str
    fields: FieldMap = field(default_factory=dict)

    def get(self, name: str) -> str:
        """Return the field value, or an empty string when the field is absent."""
        return self.fields.get(name, "")

    def has(self, name: str) -> bool:
        """Return ``True`` if the field is present and non-empty."""
        return bool(self.fields.get(name))

    @property
    def venue(self) -> str:
        return self.get("journal") or self.get("booktitle")


@dataclass(slots=True)
class Publication:
    """Display record consumed by the formatter."""

    type: str = ""
    key: str = ""
    authors: list[str] = field(default_factory=list)
    year: str = ""
    title: str = ""
    venue: str = ""
    volume: str = ""
    pages: str = ""
    note: str = ""
    doi: str = ""
    url: str = ""
    pdf: str = ""

    @property
    def year_number(self) -> int:
        """Numeric year used for sorting; non-numeric years count as 0."""
        try:
            return int(self.year.strip())
        except ValueError:
            return 0

    @classmethod
    def from_entry(cls, entry: Entry) -> Publication:
        """Build a publication from a parsed (and usually enriched) entry."""
        author = entry.get("author")
        authors = [name.strip() for name in _AUTHOR_SEPARATOR.split(author) if name.strip()]
        return cls(
            type=entry.type,
            key=entry.key,
            authors=authors,
            year=entry.get("year"),
            title=entry.get("title"),
            venue=entry.venue or entry.get("publisher"),
            volume=entry.get("volume"),
            pages=entry.get("pages"),
            note=entry.get("note"),
            doi=entry.get("doi"),
            url=entry.get("url"),
            pdf=entry.get("pdf"),
        )

    @classmethod
    def from_record(cls, record: PublicationRecord) -> Publication:
        """Build a publication from a validated JSON record."""

        def text(name: str) -> str:
            value = record.get(name)
            return "" if value is None else str(value).strip()

        return cls(
            type=text("type"),
            key=text("key"),
            authors=[author.strip() for author in record.get("authors", [])],
            year=text("year"),
            title=text("title"),
            venue=text("venue"),
            volume=text("volume"),
            pages=text("pages"),
            note=text("note"),
            doi=text("doi"),
            url=text("url"),
            pdf=text("pdf"),
        )
