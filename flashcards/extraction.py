import logging
import os
import docx
from django.conf import settings
from PyPDF2 import PdfReader
from core.exceptions import NotFound, UnsupportedFileType

logger = logging.getLogger(__name__)


def _pdf_text(path):
    reader = PdfReader(path)
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def _docx_text(path):
    document = docx.Document(path)
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


EXTRACTORS = {
    ".pdf": _pdf_text,
    ".docx": _docx_text,
}


def extract_text(path):
    """Plain text of a PDF or DOCX file, chosen by extension."""
    ext = os.path.splitext(str(path))[1].lower()
    extractor = EXTRACTORS.get(ext)
    if extractor is None:
        raise UnsupportedFileType(f"Unsupported file type: {ext or 'none'}")
    if not os.path.exists(path):
        raise NotFound("Note file not found")
    return extractor(path)


def note_local_path(note):
    return os.path.join(settings.MEDIA_ROOT, "uploads", os.path.basename(note.filename or ""))


def _missing_file_text(note):
    return (
        f'This is sample content from "{note.title}" uploaded by {note.uploader or "another user"}. '
        f"This note covers {note.subject} topics for {note.year} year, semester {note.semester}. "
        "The uploaded file is not available for text extraction."
    )


def _failed_extraction_text(note):
    return (
        f'This is sample content from "{note.title}". '
        "The file exists but text extraction failed. "
        f"This note covers {note.subject} topics for {note.year} year, semester {note.semester}."
    )


def note_content(note):
    """
    Text to feed the generator for a note. Never raises for file problems:
    a missing or unreadable file yields a description built from the note's fields.
    """
    path = note_local_path(note)
    if not note.filename or not os.path.exists(path):
        logger.warning(f"File for note {note.pk} not found locally ({path}); using placeholder text")
        return _missing_file_text(note)

    try:
        text = extract_text(path)
    except Exception as e:
        logger.warning(f"Text extraction failed for note {note.pk}: {e}")
        return _failed_extraction_text(note)

    if not text.strip():
        logger.warning(f"No extractable text in note {note.pk}; using placeholder text")
        return _failed_extraction_text(note)
    return text
