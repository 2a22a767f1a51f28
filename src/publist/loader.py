"""Load one publication list from a BibTeX or JSON source."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from .exceptions import InvalidDataError
from .json_source import load_json_publications
from .links import enrich_all
from .models import Publication
from .parser import parse_file

logger = logging.getLogger(__name__)

BIBTEX_SUFFIXES = frozenset({".bib", ".bibtex"})
JSON_SUFFIXES = frozenset({".json"})


def sort_by_year(publications: Iterable[Publication]) -> list[Publication]:
    """Sort newest first; years that are not integers count as 0.

    The sort is stable, so publications from the same year keep their source order.
    """
    return sorted(publications, key=lambda pub: pub.year_number, reverse=True)


def load_bibtex_publications(bib_path: Path) -> list[Publication]:
    """Parse a bibliography, infer missing links and convert to publications."""
    entries = enrich_all(parse_file(bib_path))
    return [Publication.from_entry(entry) for entry in entries]


def load_publications(source_path: Path, *, sort: bool = True) -> list[Publication]:
    """Load every publication from ``source_path``.

    The source type is chosen from the file suffix. The load either returns
    the complete list or raises; no partial result is produced.

    Args:
        source_path: ``.bib`` or ``.json`` file
        sort: Sort newest first when ``True``

    Raises:
        FileOperationError: If the source cannot be read
        InvalidDataError: If the source type is unsupported or its data is invalid
    """
    suffix = source_path.suffix.lower()
    if suffix in BIBTEX_SUFFIXES:
        publications = load_bibtex_publications(source_path)
    elif suffix in JSON_SUFFIXES:
        publications = load_json_publications(source_path)
    else:
        raise InvalidDataError(f"Unsupported publication source: {source_path}")

    if sort:
        publications = sort_by_year(publications)

    logger.info("Loaded %d publications from %s", len(publications), source_path.name)
    return publications
