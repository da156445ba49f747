from typing import BinaryIO

from charset_normalizer import from_bytes

from docconvert.decoders.base import BaseDecoder, DecodeContext
from docconvert.decoders.exceptions import DecoderError
from docconvert.decoders.metadata import CONTENT_ENCODING, Metadata
from docconvert.decoders.sink import TextSink
from docconvert.detection.media_types import TEXT_PLAIN


class PlainTextDecoder(BaseDecoder):
    """Decodes text documents, detecting the character encoding with charset-normalizer."""

    name = "PlainTextDecoder"
    supported_types = frozenset({TEXT_PLAIN})

    def decode(
        self,
        stream: BinaryIO,
        sink: TextSink,
        metadata: Metadata,
        context: DecodeContext,
    ) -> None:
        try:
            raw = stream.read()
            if not raw:
                return
            best = from_bytes(raw).best()
            if best is None:
                encoding, text = "utf-8", raw.decode("utf-8", errors="replace")
            else:
                encoding, text = best.encoding, str(best)
            metadata.set(CONTENT_ENCODING, encoding)
            sink.write(text)
        except DecoderError:
            raise
        except Exception as exc:
            raise DecoderError(f"plain text decoding failed: {exc}") from exc
