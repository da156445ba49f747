from typing import BinaryIO

import pdfplumber
from pdfminer.pdfdocument import PDFPasswordIncorrect

from docconvert.decoders import metadata as keys
from docconvert.decoders.base import BaseDecoder, DecodeContext
from docconvert.decoders.exceptions import DecoderError, EncryptedDocumentError
from docconvert.decoders.metadata import Metadata
from docconvert.decoders.sink import TextSink
from docconvert.detection.media_types import PDF
from docconvert.pdf.properties import apply_docinfo


class PdfPlumberAdapter(BaseDecoder):
    """Decodes PDF using pdfplumber."""

    name = "PdfPlumberAdapter"
    supported_types = frozenset({PDF})
    supports_password = True

    def decode(
        self,
        stream: BinaryIO,
        sink: TextSink,
        metadata: Metadata,
        context: DecodeContext,
    ) -> None:
        password = context.password_for(metadata) or ""
        try:
            version = _header_version(stream)
            with pdfplumber.open(stream, password=password) as pdf:
                apply_docinfo(pdf.metadata, metadata)
                metadata.set(keys.PAGE_COUNT, len(pdf.pages))
                metadata.set(keys.PDF_ENCRYPTED, bool(pdf.doc.encryption))
                metadata.set(keys.PDF_VERSION, version)
                for page in pdf.pages:
                    sink.write_block(page.extract_text() or "")
        except DecoderError:
            raise
        except Exception as exc:
            if _is_password_error(exc):
                raise EncryptedDocumentError("PDF password is missing or incorrect") from exc
            raise DecoderError(f"pdfplumber extraction failed: {exc}") from exc


def _header_version(stream: BinaryIO) -> str | None:
    position = stream.tell()
    header = stream.read(16)
    stream.seek(position)
    if not header.startswith(b"%PDF-"):
        return None
    return header[5:8].decode("ascii", errors="ignore")


def _is_password_error(exc: BaseException | None) -> bool:
    # newer pdfplumber releases wrap pdfminer errors in their own exception type
    while exc is not None:
        if isinstance(exc, PDFPasswordIncorrect):
            return True
        if any(isinstance(arg, PDFPasswordIncorrect) for arg in exc.args):
            return True
        exc = exc.__cause__ or exc.__context__
    return False
