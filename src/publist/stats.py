"""Summary counts for a publication list."""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

from .models import Publication


@dataclass(slots=True)
class PublicationStats:
    """Totals per year and per publication type."""

    total: int = 0
    by_year: dict[str, int] = field(default_factory=dict)
    by_type: dict[str, int] = field(default_factory=dict)


def publication_stats(publications: Iterable[Publication]) -> PublicationStats:
    years: Counter[str] = Counter()
    types: Counter[str] = Counter()
    total = 0
    for pub in publications:
        total += 1
        years[pub.year] += 1
        types[pub.type] += 1

    return PublicationStats(total=total, by_year=dict(years), by_type=dict(types))
