from typing import BinaryIO

from docconvert.decoders.base import BaseDecoder, DecodeContext
from docconvert.decoders.metadata import Metadata
from docconvert.decoders.sink import TextSink


class EmptyDecoder(BaseDecoder):
    """Fallback for media types no decoder handles: yields no text and no properties."""

    name = "EmptyDecoder"

    def decode(
        self,
        stream: BinaryIO,
        sink: TextSink,
        metadata: Metadata,
        context: DecodeContext,
    ) -> None:
        return None
