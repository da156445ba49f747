from docconvert.config.settings import Settings
from docconvert.decoders.base import BaseDecoder
from docconvert.decoders.msword import MsWordDecoder
from docconvert.decoders.ooxml import WordprocessingDecoder
from docconvert.decoders.opendocument import OpenDocumentDecoder
from docconvert.decoders.plain_text import PlainTextDecoder
from docconvert.decoders.registry import DecoderRegistry
from docconvert.decoders.rtf import RtfDecoder
from docconvert.detection.media_types import MediaTypeRepository
from docconvert.pdf.factory import PdfDecoderFactory


class DecoderRegistryFactory:
    """Builds the decoder registry with the PDF engine selected in settings."""

    @classmethod
    def create(
        cls,
        settings: Settings,
        repository: MediaTypeRepository | None = None,
    ) -> DecoderRegistry:
        decoders: list[BaseDecoder] = [
            PdfDecoderFactory.create(settings),
            WordprocessingDecoder(),
            MsWordDecoder(),
            OpenDocumentDecoder(),
            RtfDecoder(),
            PlainTextDecoder(),
        ]
        return DecoderRegistry(decoders, repository=repository)
