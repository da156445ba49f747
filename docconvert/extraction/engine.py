from typing import BinaryIO

from docconvert.decoders import metadata as keys
from docconvert.decoders.base import DecodeContext
from docconvert.decoders.exceptions import DecoderError
from docconvert.decoders.metadata import Metadata
from docconvert.decoders.registry import DecoderRegistry
from docconvert.decoders.sink import TextSink
from docconvert.detection.media_types import MediaTypeDescriptor
from docconvert.extraction.models import (
    ExtractionLimits,
    ExtractionOutcome,
    Failure,
    FailureReason,
    Success,
)
from docconvert.extraction.normalization import normalize_properties
from docconvert.logging.logger import Log


class ExtractionEngine:
    """Runs the decoder for a detected media type within the given limits.

    Decoder failures are returned as Failure outcomes, never raised. The
    engine holds no per-call state and can be shared between threads.
    """

    def __init__(self, registry: DecoderRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> DecoderRegistry:
        return self._registry

    def extract(
        self,
        stream: BinaryIO,
        media_type: MediaTypeDescriptor,
        limits: ExtractionLimits,
        *,
        size_bytes: int | None = None,
        filename: str | None = None,
        require_text: bool = True,
    ) -> ExtractionOutcome:
        """Decode a stream into body text and normalized attributes.

        Args:
            stream: Seekable document stream positioned at its start.
            media_type: Result of media type detection.
            limits: Size cap and optional decode password.
            size_bytes: Reported document size; checked before any read.
            filename: Recorded as the resource name property.
            require_text: Treat a zero-length body as EMPTY_RESULT.
        """
        if size_bytes is not None and limits.exceeds(size_bytes):
            Log.error(
                f"Document size {size_bytes} exceeds maximum file size {limits.max_input_bytes}"
            )
            return Failure(
                FailureReason.EXCEEDS_SIZE_LIMIT,
                f"size {size_bytes} exceeds {limits.max_input_bytes} bytes",
            )

        decoder = self._registry.decoder_for(media_type.type_id)
        sink = TextSink(limits.write_limit)
        metadata = Metadata()
        if filename:
            metadata.set(keys.RESOURCE_NAME, filename)
        metadata.set(keys.CONTENT_TYPE, media_type.type_id)
        context = _context_for(limits)

        Log.debug(f"Decoding {media_type.type_id} with {decoder.name}")
        try:
            decoder.decode(stream, sink, metadata, context)
        except DecoderError as exc:
            Log.error(f"{decoder.name} failed to decode {media_type.type_id}: {exc}", exc_info=True)
            return Failure(FailureReason.DECODE_ERROR, str(exc))
        metadata.add(keys.PARSED_BY, decoder.name)

        body_text = sink.getvalue()
        if require_text and not body_text:
            Log.warning(f"Document of type {media_type.type_id} was empty or can't be converted to text")
            return Failure(FailureReason.EMPTY_RESULT, "no text could be extracted")
        return Success(body_text=body_text, attributes=normalize_properties(metadata))


def _context_for(limits: ExtractionLimits) -> DecodeContext:
    password = limits.decode_password
    if not password:
        return DecodeContext()
    return DecodeContext(password_provider=lambda _metadata: password)
