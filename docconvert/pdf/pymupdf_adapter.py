from typing import BinaryIO

import pymupdf

from docconvert.decoders import metadata as keys
from docconvert.decoders.base import BaseDecoder, DecodeContext
from docconvert.decoders.exceptions import DecoderError, EncryptedDocumentError
from docconvert.decoders.metadata import Metadata
from docconvert.decoders.sink import TextSink
from docconvert.detection.media_types import PDF
from docconvert.pdf.properties import apply_docinfo


class PyMuPdfAdapter(BaseDecoder):
    """Decodes PDF using PyMuPDF."""

    name = "PyMuPdfAdapter"
    supported_types = frozenset({PDF})
    supports_password = True

    def decode(
        self,
        stream: BinaryIO,
        sink: TextSink,
        metadata: Metadata,
        context: DecodeContext,
    ) -> None:
        try:
            with pymupdf.open(stream=stream.read(), filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                if doc.needs_pass:
                    password = context.password_for(metadata)
                    if not password or not doc.authenticate(password):
                        raise EncryptedDocumentError("PDF password is missing or incorrect")
                info = dict(doc.metadata or {})
                version = str(info.pop("format", "") or "").removeprefix("PDF ")
                encryption = info.pop("encryption", None)
                apply_docinfo(info, metadata)
                metadata.set(keys.PAGE_COUNT, doc.page_count)
                metadata.set(keys.PDF_ENCRYPTED, bool(doc.is_encrypted or encryption))
                metadata.set(keys.PDF_VERSION, version)
                for page in doc:
                    sink.write_block(page.get_text())
        except DecoderError:
            raise
        except Exception as exc:
            raise DecoderError(f"pymupdf extraction failed: {exc}") from exc
