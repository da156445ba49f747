from docconvert.config.settings import Settings
from docconvert.decoders.base import BaseDecoder
from docconvert.pdf.pdfplumber_adapter import PdfPlumberAdapter
from docconvert.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfDecoderFactory:
    """Creates the PDF decoder selected in settings."""

    ADAPTERS: dict[str, type[BaseDecoder]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseDecoder:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()
