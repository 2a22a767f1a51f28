"""Tests for committing inferred links to a BibTeX file."""

from pathlib import Path

import bibtexparser
import pytest

from publist.exceptions import FileOperationError
from publist.export import add_links_to_bibtex, enrich_bibtex_file
from publist.parser import parse

STRING_AND_MACROS = """@string{jgr = "Journal of Geophysical Research"}

% A hand-written note about this file
@article{k,
  title = {The {\\"{o}} Effect},
  journal = jgr,
  month = jan,
  year = {2020},
  note = {arXiv:2310.12345}
}
"""


def _write_bib(tmp_path: Path, content: str) -> Path:
    bib_path = tmp_path / "refs.bib"
    bib_path.write_text(content, encoding="utf-8")
    return bib_path


def test_links_spliced_without_touching_other_text():
    updated, report = add_links_to_bibtex(STRING_AND_MACROS)

    assert report.added == {"k": ["doi", "url"]}
    assert updated == STRING_AND_MACROS.replace(
        "  note = {arXiv:2310.12345}\n}",
        "  note = {arXiv:2310.12345},\n"
        "  doi = {10.48550/arXiv.2310.12345},\n"
        "  url = {https://arxiv.org/abs/2310.12345}\n}",
    )


def test_enrich_file_keeps_strings_macros_and_nested_braces(tmp_path: Path):
    bib_path = _write_bib(tmp_path, STRING_AND_MACROS)

    report = enrich_bibtex_file(bib_path)

    assert report.total_entries == 1
    text = bib_path.read_text(encoding="utf-8")
    assert '@string{jgr = "Journal of Geophysical Research"}' in text
    assert "% A hand-written note about this file" in text
    assert "journal = jgr," in text
    assert "month = jan," in text
    assert 'title = {The {\\"{o}} Effect},' in text

    library = bibtexparser.parse_file(str(bib_path))
    fields = library.entries[0].fields_dict
    assert fields["doi"].value == "10.48550/arXiv.2310.12345"
    assert fields["url"].value == "https://arxiv.org/abs/2310.12345"


def test_trailing_comma_and_tab_indent_are_followed():
    text = "@inproceedings{2022.lrec-1.12,\n\ttitle = {A Corpus},\n}\n"

    updated, _ = add_links_to_bibtex(text)

    assert updated == (
        "@inproceedings{2022.lrec-1.12,\n\ttitle = {A Corpus},\n"
        "\turl = {https://aclanthology.org/2022.lrec-1.12/},\n}\n"
    )


def test_single_line_entry():
    updated, _ = add_links_to_bibtex("@misc{k, note={doi:10.1234/abc}}")

    assert parse(updated)[0].fields == {
        "note": "doi:10.1234/abc",
        "doi": "10.1234/abc",
        "url": "https://doi.org/10.1234/abc",
    }


def test_existing_empty_field_not_duplicated():
    text = "@misc{k,\n  doi = {},\n  note = {arXiv:2310.12345}\n}\n"

    updated, report = add_links_to_bibtex(text)

    assert report.added == {"k": ["url"]}
    assert updated.count("doi =") == 1


def test_entries_without_new_links_left_alone():
    text = (
        "@article{a,\n  journal = {Plain Journal}\n}\n\n"
        "@article{b,\n  journal = {bioRxiv preprint bioRxiv:2024.01.15.575123}\n}\n"
    )

    updated, report = add_links_to_bibtex(text)

    assert list(report.added) == ["b"]
    assert updated.startswith("@article{a,\n  journal = {Plain Journal}\n}\n\n@article{b,")
    assert "doi = {10.1101/2024.01.15.575123}" in updated


def test_skipped_blocks_survive(tmp_path: Path):
    content = (
        "@comment{jabref-meta: groups}\n"
        "@article{broken, title={Never closed},\n"
        "@misc{k, note={arXiv:2310.12345}}\n"
    )
    bib_path = _write_bib(tmp_path, content)
    output = tmp_path / "out.bib"

    enrich_bibtex_file(bib_path, output)

    written = output.read_text(encoding="utf-8")
    assert written.startswith(
        "@comment{jabref-meta: groups}\n@article{broken, title={Never closed},\n"
    )
    assert bib_path.read_text(encoding="utf-8") == content


def test_dry_run_does_not_write(tmp_path: Path):
    bib_path = _write_bib(tmp_path, STRING_AND_MACROS)

    report = enrich_bibtex_file(bib_path, dry_run=True)

    assert report.added == {"k": ["doi", "url"]}
    assert bib_path.read_text(encoding="utf-8") == STRING_AND_MACROS


def test_missing_file(tmp_path: Path):
    with pytest.raises(FileOperationError):
        enrich_bibtex_file(tmp_path / "missing.bib")
