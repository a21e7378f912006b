import os
from pathlib import Path
from unittest.mock import MagicMock, patch
import docx
import pytest
from core.exceptions import NotFound, UnsupportedFileType
from flashcards.extraction import extract_text, note_content, note_local_path


def _write_docx(path, *paragraphs):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    document = docx.Document()
    for text in paragraphs:
        document.add_paragraph(text)
    document.save(str(path))


def test_docx_paragraphs_are_joined(tmp_path):
    path = tmp_path / "notes.docx"
    _write_docx(path, "Photosynthesis happens in chloroplasts.", "Light reactions make ATP.")

    text = extract_text(str(path))
    assert "Photosynthesis happens in chloroplasts." in text
    assert "Light reactions make ATP." in text


def test_pdf_pages_are_joined(tmp_path):
    path = tmp_path / "notes.pdf"
    path.write_bytes(b"%PDF-1.4")
    pages = [MagicMock(), MagicMock(), MagicMock()]
    pages[0].extract_text.return_value = "Page one"
    pages[1].extract_text.return_value = None
    pages[2].extract_text.return_value = "Page three"

    with patch("flashcards.extraction.PdfReader") as reader:
        reader.return_value.pages = pages
        text = extract_text(str(path))

    assert text == "Page one\n\nPage three"


@pytest.mark.parametrize("name", ["notes.txt", "slides.pptx", "README"])
def test_unsupported_types(tmp_path, name):
    path = tmp_path / name
    path.write_text("hello")
    with pytest.raises(UnsupportedFileType):
        extract_text(str(path))


def test_missing_file(tmp_path):
    with pytest.raises(NotFound):
        extract_text(str(tmp_path / "gone.pdf"))


def test_note_content_reads_local_upload(make_note):
    note = make_note(filename="1700000000000-cells.docx")
    _write_docx(note_local_path(note), "The nucleus stores DNA.")

    assert "The nucleus stores DNA." in note_content(note)


def test_note_content_placeholder_for_missing_file(make_note):
    note = make_note(title="Thermodynamics", filename="1700000000000-heat.pdf", uploader="bob")

    text = note_content(note)
    assert '"Thermodynamics"' in text
    assert "uploaded by bob" in text
    assert "not available" in text


def test_note_content_placeholder_when_extraction_fails(make_note):
    note = make_note(filename="1700000000000-broken.pdf")
    path = note_local_path(note)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as fh:
        fh.write(b"not really a pdf")

    with patch("flashcards.extraction.PdfReader", side_effect=ValueError("bad xref")):
        text = note_content(note)

    assert '"Cell Biology"' in text
    assert "extraction failed" in text


def test_note_content_placeholder_when_file_has_no_text(make_note):
    note = make_note(filename="1700000000000-blank.docx")
    _write_docx(note_local_path(note), "", "   ")

    assert "extraction failed" in note_content(note)
