import io
import struct
from collections.abc import Callable
from pathlib import Path

import docx
import pytest
from odf import dc, meta
from odf.opendocument import OpenDocumentText
from odf.text import H, P
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from docconvert.config.settings import Settings
from docconvert.decoders.factory import DecoderRegistryFactory
from docconvert.detection.detector import MediaTypeDetector
from docconvert.detection.media_types import MediaTypeRepository
from docconvert.extraction.engine import ExtractionEngine


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def encrypted_pdf_bytes() -> bytes:
    """Generate a PDF protected with the user password 'test'."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter, encrypt="test")
    c.drawString(72, 720, "Top secret content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def docx_bytes() -> bytes:
    """Generate a Word document with two paragraphs, a table and core properties."""
    document = docx.Document()
    document.add_paragraph("First paragraph")
    document.add_paragraph("Second paragraph")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Cell A"
    table.rows[0].cells[1].text = "Cell B"
    document.core_properties.author = "Jane Doe"
    document.core_properties.title = "Quarterly Report"
    document.core_properties.keywords = ""
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


@pytest.fixture()
def odt_bytes(tmp_path: Path) -> bytes:
    """Generate an OpenDocument text file with a heading, a paragraph and metadata."""
    document = OpenDocumentText()
    document.meta.addElement(dc.Title(text="Meeting Notes"))
    document.meta.addElement(meta.InitialCreator(text="John Smith"))
    document.text.addElement(H(outlinelevel=1, text="Agenda"))
    document.text.addElement(P(text="Budget review"))
    path = tmp_path / "notes.odt"
    document.save(str(path))
    return path.read_bytes()


@pytest.fixture()
def rtf_bytes() -> bytes:
    return (
        rb"{\rtf1\ansi\deff0"
        rb"{\info{\title Annual Plan}{\author Ada Lovelace}"
        rb"{\creatim\yr2024\mo3\dy15\hr9\min30}}"
        rb"Hello RTF world\par Second line\par}"
    )


def build_word_streams(
    text: str,
    compressed: bool = True,
    flags: int = 0x0200,
) -> tuple[bytes, bytes]:
    """Build a minimal WordDocument stream and its 1Table stream holding text."""
    word = bytearray(1024)
    struct.pack_into("<H", word, 0x00, 0xA5EC)
    struct.pack_into("<H", word, 0x0A, flags)
    struct.pack_into("<H", word, 0x20, 14)
    struct.pack_into("<H", word, 0x3E, 22)
    struct.pack_into("<I", word, 0x4C, len(text))
    struct.pack_into("<H", word, 0x98, 93)
    if compressed:
        encoded = text.encode("cp1252")
        fc = (512 * 2) | 0x40000000
    else:
        encoded = text.encode("utf-16-le")
        fc = 512
    word[512:512 + len(encoded)] = encoded
    plc = struct.pack("<II", 0, len(text)) + struct.pack("<HIH", 0, fc, 0)
    clx = b"\x02" + struct.pack("<I", len(plc)) + plc
    table = bytes(16) + clx
    struct.pack_into("<II", word, 0x9A + 33 * 8, 16, len(clx))
    return bytes(word), table


@pytest.fixture()
def repository() -> MediaTypeRepository:
    return MediaTypeRepository()


@pytest.fixture()
def detector(repository: MediaTypeRepository) -> MediaTypeDetector:
    return MediaTypeDetector(repository)


@pytest.fixture()
def engine(repository: MediaTypeRepository) -> ExtractionEngine:
    return ExtractionEngine(DecoderRegistryFactory.create(Settings(), repository))


@pytest.fixture()
def word_streams() -> Callable[..., tuple[bytes, bytes]]:
    """Factory fixture for synthetic WordDocument/1Table stream pairs."""
    return build_word_streams
