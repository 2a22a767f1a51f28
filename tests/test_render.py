"""Tests for HTML formatting."""

import pytest

from publist.config import RenderConfig
from publist.exceptions import InvalidDataError
from publist.models import Publication
from publist.render import (
    ERROR_HTML,
    format_authors,
    format_publication,
    inject_html,
    render_publications,
    type_label,
)


def test_format_authors_highlight():
    html = format_authors(["Duan, X.", "Smith, J."], highlight="Duan")

    assert html == "<b>Duan, X.</b>, Smith, J."


def test_format_authors_without_highlight():
    assert format_authors(["Duan, X.", "Smith, J."]) == "Duan, X., Smith, J."


def test_format_full_publication():
    pub = Publication(
        authors=["Duan, X.", "Smith, J."],
        year="2023",
        title="A {BERT} Study",
        venue="Journal of Tests",
        volume="12",
        pages="1--10",
        note="in press",
        doi="10.1234/abc",
        pdf="papers/a.pdf",
    )

    html = format_publication(pub, highlight="Duan")

    assert html == (
        "<b>Duan, X.</b>, Smith, J. (2023). A BERT Study. <i>Journal of Tests</i>, 12: 1--10. "
        '(in press) <a href="https://doi.org/10.1234/abc" target="_blank">10.1234/abc</a>'
        ' <a href="papers/a.pdf" target="_blank">[pdf]</a>'
    )


def test_doi_link_prefers_explicit_url():
    pub = Publication(authors=["A"], year="2020", title="T", venue="V",
                      doi="10.48550/arXiv.2310.12345", url="https://arxiv.org/abs/2310.12345")

    html = format_publication(pub)

    assert '<a href="https://arxiv.org/abs/2310.12345" target="_blank">10.48550/arXiv.2310.12345</a>' in html


def test_url_only_link():
    pub = Publication(authors=["A"], year="2025", title="T", venue="V",
                      url="https://aclanthology.org/2025.coling-main.677/")

    html = format_publication(pub)

    assert html.endswith(
        '<a href="https://aclanthology.org/2025.coling-main.677/" target="_blank">[Link]</a>'
    )


def test_text_is_escaped():
    pub = Publication(authors=["O'Brien & Co"], year="2020", title="x < y", venue="V")

    html = format_publication(pub)

    assert "O&#x27;Brien &amp; Co" in html
    assert "x &lt; y" in html


def test_render_publications_separators():
    pubs = [Publication(authors=["A"], year="2023", title="One"),
            Publication(authors=["B"], year="2020", title="Two")]

    html = render_publications(pubs, RenderConfig())

    assert html.count("<br><br>") == 1
    assert html.index("One") < html.index("Two")


def test_render_publications_group_by_year():
    pubs = [Publication(year="2023", title="One"),
            Publication(year="2023", title="Two"),
            Publication(year="2020", title="Three")]

    html = render_publications(pubs, RenderConfig(group_by_year=True))

    assert html.count("<h5") == 2
    assert "<b>2023</b></h5>" in html
    assert "<b>2020</b></h5>" in html


def test_render_empty_list():
    assert render_publications([], RenderConfig()) == ""


@pytest.mark.parametrize(
    "pub_type, label",
    [
        ("journal", "Journal Article"),
        ("conference", "Conference Paper"),
        ("book_chapter", "Book Chapter"),
        ("inproceedings", "Conference Paper"),
        ("patent", "patent"),
    ],
)
def test_type_label(pub_type: str, label: str):
    assert type_label(pub_type) == label


PAGE = """<html><body>
<p>Total: <span id="publication-count">0</span></p>
<div class="pubs" id="publication-list">
  <p>Loading...</p>
</div>
</body></html>"""


def test_inject_html_replaces_container_and_counter():
    page = inject_html(PAGE, "<b>list</b>", 7, RenderConfig())

    assert '<div class="pubs" id="publication-list"><b>list</b></div>' in page
    assert '<span id="publication-count">7</span>' in page
    assert "Loading" not in page


def test_inject_html_error_leaves_counter():
    page = inject_html(PAGE, ERROR_HTML, None, RenderConfig())

    assert ERROR_HTML in page
    assert '<span id="publication-count">0</span>' in page


def test_inject_html_missing_container():
    with pytest.raises(InvalidDataError):
        inject_html("<html></html>", "x", 1, RenderConfig())
