"""HTML formatting for publication lists."""

from __future__ import annotations

import html
import logging
import re
from collections.abc import Sequence

from .config import RenderConfig
from .exceptions import InvalidDataError
from .models import Publication

logger = logging.getLogger(__name__)

TYPE_LABELS = {
    "journal": "Journal Article",
    "article": "Journal Article",
    "conference": "Conference Paper",
    "inproceedings": "Conference Paper",
    "workshop": "Workshop Paper",
    "preprint": "Preprint",
    "misc": "Preprint",
    "book_chapter": "Book Chapter",
    "incollection": "Book Chapter",
    "thesis": "Thesis",
    "phdthesis": "Thesis",
}

ERROR_HTML = '<p style="color: red;">Error loading publications. Please refresh the page.</p>'

YEAR_HEADER = (
    '<h5 style="margin-top: 20px; margin-bottom: 10px; color: #666;"><b>{year}</b></h5>'
)

ENTRY_SEPARATOR = "<br><br>"


def type_label(pub_type: str) -> str:
    """Return the human-readable label for a publication type."""
    return TYPE_LABELS.get(pub_type, pub_type)


def _text(value: str) -> str:
    """Escape a field for display, dropping BibTeX grouping braces."""
    return html.escape(value.replace("{", "").replace("}", ""))


def format_authors(authors: Sequence[str], highlight: str = "") -> str:
    """Join author names, bolding those that contain ``highlight``."""
    formatted = []
    for author in authors:
        name = _text(author)
        if highlight and highlight in author:
            name = f"<b>{name}</b>"
        formatted.append(name)
    return ", ".join(formatted)


def format_link(pub: Publication) -> str:
    if pub.doi:
        href = pub.url or f"https://doi.org/{pub.doi}"
        return f'<a href="{html.escape(href)}" target="_blank">{html.escape(pub.doi)}</a>'
    if pub.url:
        return f'<a href="{html.escape(pub.url)}" target="_blank">[Link]</a>'
    return ""


def format_publication(pub: Publication, highlight: str = "") -> str:
    """Format one publication in the fixed citation style.

    ``Authors (Year). Title. <i>Venue</i>, Volume: Pages. (Note) <doi link> [pdf]``
    """
    parts = [format_authors(pub.authors, highlight), f" ({_text(pub.year)}). "]

    if pub.title:
        parts.append(f"{_text(pub.title)}. ")

    source = f"<i>{_text(pub.venue)}</i>" if pub.venue else ""
    if pub.volume:
        source += f", {_text(pub.volume)}"
    if pub.pages:
        source += f": {_text(pub.pages)}"
    if source:
        parts.append(f"{source}. ")

    if pub.note:
        parts.append(f"({_text(pub.note)}) ")

    parts.append(format_link(pub))

    if pub.pdf:
        parts.append(f' <a href="{html.escape(pub.pdf)}" target="_blank">[pdf]</a>')

    return "".join(parts).rstrip()


def render_publications(publications: Sequence[Publication], config: RenderConfig) -> str:
    """Render the list as one HTML fragment.

    With ``group_by_year`` a header is emitted whenever the year changes, so the
    list is expected to be sorted by year already.
    """
    chunks: list[str] = []
    current_year: str | None = None

    for index, pub in enumerate(publications):
        if config.group_by_year and pub.year != current_year:
            current_year = pub.year
            chunks.append(YEAR_HEADER.format(year=_text(current_year)))

        chunks.append(format_publication(pub, config.highlight))

        if index < len(publications) - 1:
            chunks.append(ENTRY_SEPARATOR)

    return "".join(chunks)


def _element_pattern(element_id: str) -> re.Pattern[str]:
    return re.compile(
        r'(<(\w+)\b[^>]*\bid="' + re.escape(element_id) + r'"[^>]*>)(.*?)(</\2\s*>)',
        re.DOTALL,
    )


def inject_html(page: str, fragment: str, count: int | None, config: RenderConfig) -> str:
    """Replace the contents of the list container (and counter, if present) in a page.

    Args:
        page: Full HTML page
        fragment: Rendered publication list
        count: Number shown in the counter element; ``None`` leaves it untouched
        config: Supplies the container and counter element ids

    Raises:
        InvalidDataError: If the page has no container element
    """
    container = _element_pattern(config.container_id)
    page, replaced = container.subn(
        lambda match: f"{match.group(1)}{fragment}{match.group(4)}", page, count=1
    )
    if not replaced:
        raise InvalidDataError(f"Container element #{config.container_id} not found")

    if count is not None:
        counter = _element_pattern(config.counter_id)
        page, replaced = counter.subn(
            lambda match: f"{match.group(1)}{count}{match.group(4)}", page, count=1
        )
        if not replaced:
            logger.debug("Counter element #%s not found, skipping", config.counter_id)

    return page
