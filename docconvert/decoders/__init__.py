from docconvert.decoders.base import BaseDecoder, DecodeContext
from docconvert.decoders.exceptions import (
    DecoderError,
    EncryptedDocumentError,
    WriteLimitReachedError,
)
from docconvert.decoders.metadata import Metadata
from docconvert.decoders.registry import DecoderRegistry
from docconvert.decoders.sink import TextSink

__all__ = [
    "BaseDecoder",
    "DecodeContext",
    "DecoderError",
    "DecoderRegistry",
    "EncryptedDocumentError",
    "Metadata",
    "TextSink",
    "WriteLimitReachedError",
]
