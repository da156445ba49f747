import shutil
import tempfile
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO

from docconvert.detection.detector import MediaTypeDetector
from docconvert.detection.exceptions import DetectionError
from docconvert.detection.media_types import MediaTypeDescriptor
from docconvert.extraction.engine import ExtractionEngine
from docconvert.extraction.models import (
    ExtractionLimits,
    ExtractionOutcome,
    Failure,
    FailureReason,
)
from docconvert.logging.logger import Log
from docconvert.processor.models import PipelineResult, SourceDocument

SPOOL_MAX_MEMORY = 8 * 1024 * 1024


class BasePipeline(ABC):
    """Shared detect-then-extract flow for the document pipelines."""

    require_text: bool = True

    def __init__(self, detector: MediaTypeDetector, engine: ExtractionEngine) -> None:
        self._detector = detector
        self._engine = engine

    @abstractmethod
    def run(
        self,
        document: SourceDocument,
        limits: ExtractionLimits,
        filename_hint: str | None = None,
    ) -> PipelineResult:
        """Process one document end to end."""

    def _detect_and_extract(
        self,
        document: SourceDocument,
        limits: ExtractionLimits,
        filename: str | None,
    ) -> tuple[MediaTypeDescriptor | None, ExtractionOutcome]:
        if limits.exceeds(document.size_bytes):
            Log.error(
                f"Document {document.uuid} file size {document.size_bytes} "
                f"exceeds maximum file size {limits.max_input_bytes}"
            )
            return None, Failure(
                FailureReason.EXCEEDS_SIZE_LIMIT,
                f"size {document.size_bytes} exceeds {limits.max_input_bytes} bytes",
            )
        try:
            with document.open() as raw, _peekable(raw) as stream:
                media_type = self._detector.detect(stream, filename)
                outcome = self._engine.extract(
                    stream,
                    media_type,
                    limits,
                    size_bytes=document.size_bytes,
                    filename=filename,
                    require_text=self.require_text,
                )
        except (DetectionError, OSError) as exc:
            Log.error(f"Unable to read document {document.uuid}: {exc}")
            return None, Failure(FailureReason.DETECTION_ERROR, str(exc))
        return media_type, outcome


@contextmanager
def _peekable(stream: BinaryIO) -> Iterator[BinaryIO]:
    """Yield a seekable view of stream, spooling it to a temporary file if needed."""
    if stream.seekable():
        yield stream
        return
    with tempfile.SpooledTemporaryFile(max_size=SPOOL_MAX_MEMORY) as spool:
        shutil.copyfileobj(stream, spool)
        spool.seek(0)
        yield spool  # type: ignore[misc]
