import io
import zipfile
from unittest.mock import MagicMock, patch

import pytest

from docconvert.detection import media_types as mt
from docconvert.detection.detector import MediaTypeDetector
from docconvert.detection.exceptions import DetectionError


class _BrokenStream(io.RawIOBase):
    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def tell(self) -> int:
        return 0

    def readinto(self, buffer: bytearray) -> int:
        raise OSError("device not ready")


class _ForwardOnlyStream(io.RawIOBase):
    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return False


class _CountingStream(io.BytesIO):
    def __init__(self, data: bytes) -> None:
        super().__init__(data)
        self.bytes_read = 0

    def read(self, size: int | None = -1) -> bytes:
        chunk = super().read(size)
        self.bytes_read += len(chunk)
        return chunk


def _zip_bytes(entries: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as archive:
        for name, data in entries.items():
            archive.writestr(name, data)
    return buf.getvalue()


class TestMagicDetection:
    def test_pdf(self, detector: MediaTypeDetector, sample_pdf_bytes: bytes) -> None:
        descriptor = detector.detect(io.BytesIO(sample_pdf_bytes))
        assert descriptor.type_id == mt.PDF
        assert descriptor.file_extension == ".pdf"

    def test_rtf(self, detector: MediaTypeDetector, rtf_bytes: bytes) -> None:
        assert detector.detect(io.BytesIO(rtf_bytes)).type_id == mt.RTF

    def test_plain_text(self, detector: MediaTypeDetector) -> None:
        descriptor = detector.detect(io.BytesIO(b"Just some words.\nAnother line.\n"))
        assert descriptor.type_id == mt.TEXT_PLAIN
        assert descriptor.file_extension == ".txt"

    def test_utf8_text(self, detector: MediaTypeDetector) -> None:
        content = ("Grüße aus München\n" * 10).encode("utf-8")
        assert detector.detect(io.BytesIO(content)).type_id == mt.TEXT_PLAIN

    def test_binary_is_octet_stream(self, detector: MediaTypeDetector) -> None:
        descriptor = detector.detect(io.BytesIO(bytes(range(256))))
        assert descriptor.type_id == mt.OCTET_STREAM
        assert descriptor.file_extension is None

    def test_empty_stream_is_octet_stream(self, detector: MediaTypeDetector) -> None:
        assert detector.detect(io.BytesIO(b"")).type_id == mt.OCTET_STREAM

    def test_png(self, detector: MediaTypeDetector) -> None:
        assert detector.detect(io.BytesIO(b"\x89PNG\r\n\x1a\n" + bytes(32))).type_id == "image/png"

    def test_html(self, detector: MediaTypeDetector) -> None:
        content = b"<!DOCTYPE html><html><body>Hi</body></html>"
        assert detector.detect(io.BytesIO(content)).type_id == "text/html"


class TestContainerDetection:
    def test_docx(self, detector: MediaTypeDetector, docx_bytes: bytes) -> None:
        descriptor = detector.detect(io.BytesIO(docx_bytes))
        assert descriptor.type_id == mt.DOCX
        assert descriptor.file_extension == ".docx"

    def test_odt(self, detector: MediaTypeDetector, odt_bytes: bytes) -> None:
        descriptor = detector.detect(io.BytesIO(odt_bytes))
        assert descriptor.type_id == mt.ODT
        assert descriptor.file_extension == ".odt"

    def test_xlsx_parts(self, detector: MediaTypeDetector) -> None:
        content = _zip_bytes({"[Content_Types].xml": b"<Types/>", "xl/workbook.xml": b"<x/>"})
        assert detector.detect(io.BytesIO(content)).type_id == mt.XLSX

    def test_plain_zip(self, detector: MediaTypeDetector) -> None:
        content = _zip_bytes({"readme.txt": b"hello"})
        assert detector.detect(io.BytesIO(content)).type_id == mt.APPLICATION_ZIP

    def test_corrupt_zip_is_generic_zip(self, detector: MediaTypeDetector) -> None:
        assert detector.detect(io.BytesIO(b"PK\x03\x04" + bytes(64))).type_id == mt.APPLICATION_ZIP

    def test_unreadable_ole_storage_is_generic_office(self, detector: MediaTypeDetector) -> None:
        content = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + bytes(600)
        descriptor = detector.detect(io.BytesIO(content))
        assert descriptor.type_id == mt.OLE_STORAGE
        assert descriptor.file_extension is None


class TestFilenameHint:
    def test_content_wins_over_conflicting_name(
        self, detector: MediaTypeDetector, sample_pdf_bytes: bytes
    ) -> None:
        assert detector.detect(io.BytesIO(sample_pdf_bytes), "report.txt").type_id == mt.PDF

    def test_name_refines_plain_text(self, detector: MediaTypeDetector) -> None:
        descriptor = detector.detect(io.BytesIO(b"a,b\n1,2\n"), "data.csv")
        assert descriptor.type_id == "text/csv"
        assert descriptor.file_extension == ".csv"

    def test_name_does_not_turn_text_into_pdf(self, detector: MediaTypeDetector) -> None:
        assert detector.detect(io.BytesIO(b"plain words"), "fake.pdf").type_id == mt.TEXT_PLAIN

    def test_matching_name_keeps_type(self, detector: MediaTypeDetector) -> None:
        assert detector.detect(io.BytesIO(b"plain words"), "note.txt").type_id == mt.TEXT_PLAIN


class TestStreamHandling:
    def test_restores_stream_position(self, detector: MediaTypeDetector, docx_bytes: bytes) -> None:
        stream = io.BytesIO(docx_bytes)
        detector.detect(stream)
        assert stream.tell() == 0
        assert stream.read() == docx_bytes

    def test_detection_is_idempotent(self, detector: MediaTypeDetector, sample_pdf_bytes: bytes) -> None:
        stream = io.BytesIO(sample_pdf_bytes)
        first = detector.detect(stream, "a.pdf")
        second = detector.detect(stream, "a.pdf")
        assert first == second

    def test_unreadable_stream_raises(self, detector: MediaTypeDetector) -> None:
        with pytest.raises(DetectionError, match="device not ready"):
            detector.detect(_BrokenStream())

    def test_forward_only_stream_raises(self, detector: MediaTypeDetector) -> None:
        with pytest.raises(DetectionError, match="not seekable"):
            detector.detect(_ForwardOnlyStream())

    def test_large_container_is_not_read_whole(self, detector: MediaTypeDetector) -> None:
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as archive:
            archive.writestr("[Content_Types].xml", b"<Types/>")
            archive.writestr("word/document.xml", b"<w:document/>")
            archive.writestr("word/media/scan.bin", bytes(2_000_000), compress_type=zipfile.ZIP_STORED)
        stream = _CountingStream(buf.getvalue())

        assert detector.detect(stream).type_id == mt.DOCX
        assert stream.bytes_read < 100_000
        assert stream.tell() == 0

    def test_ole_storage_is_inspected_in_place(self, detector: MediaTypeDetector) -> None:
        ole = MagicMock()
        ole.exists.side_effect = lambda name: name == "WordDocument"
        stream = io.BytesIO(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + bytes(600))

        with patch("docconvert.detection.detector.olefile.OleFileIO", return_value=ole) as opener:
            descriptor = detector.detect(stream)

        assert descriptor.type_id == mt.MSWORD
        opener.assert_called_once_with(stream)
        ole.close.assert_not_called()
        assert stream.tell() == 0
        assert not stream.closed


class TestByteOrderMark:
    def test_utf8_bom_before_pdf_header(self, detector: MediaTypeDetector) -> None:
        content = b"\xef\xbb\xbf%PDF-1.4\n%%EOF\n"
        assert detector.detect(io.BytesIO(content)).type_id == mt.PDF

    def test_partial_bom_bytes_are_not_stripped(self, detector: MediaTypeDetector) -> None:
        content = b"\xbb\xef%PDF-1.4 is quoted in this note\n"
        assert detector.detect(io.BytesIO(content)).type_id == mt.TEXT_PLAIN

    def test_bom_before_rtf_header(self, detector: MediaTypeDetector) -> None:
        content = b"\xef\xbb\xbf{\\rtf1\\ansi Hello}"
        assert detector.detect(io.BytesIO(content)).type_id == mt.RTF
