"""Type definitions for publist data structures."""

from typing import TypedDict


class PublicationRecord(TypedDict, total=False):
    """Structure of one record in a ``publications.json`` file."""

    type: str
    key: str
    authors: list[str]
    year: int | str
    title: str
    venue: str | None
    volume: str | int | None
    pages: str | None
    note: str | None
    doi: str | None
    url: str | None
    pdf: str | None


class LinkResult(TypedDict, total=False):
    """Partial link result produced by an inference rule."""

    doi: str
    url: str


# Type aliases for common data structures
FieldMap = dict[str, str]
PublicationRecords = list[PublicationRecord]
