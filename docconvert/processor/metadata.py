from docconvert.extraction.models import ExtractionLimits, Success
from docconvert.logging.logger import Log
from docconvert.processor.base import BasePipeline
from docconvert.processor.models import (
    MIME_EXTENSION,
    MIME_TYPE,
    DerivedRecord,
    PipelineResult,
    SourceDocument,
)


class MetadataPipeline(BasePipeline):
    """Extracts document properties without producing a text artifact.

    The companion record is a clone of the original carrying the detected
    media type and the extracted properties; its content is the original
    content. Documents without any text still succeed here.
    """

    require_text = False

    def run(
        self,
        document: SourceDocument,
        limits: ExtractionLimits,
        filename_hint: str | None = None,
    ) -> PipelineResult:
        filename = filename_hint if filename_hint is not None else document.filename
        media_type, outcome = self._detect_and_extract(document, limits, filename)
        if not isinstance(outcome, Success) or media_type is None:
            return PipelineResult(outcome=outcome)

        companion = DerivedRecord.clone(document)
        companion = companion.with_attribute(MIME_TYPE, media_type.type_id)
        companion = companion.with_attribute(MIME_EXTENSION, media_type.file_extension)
        companion = companion.with_attributes(outcome.attributes)
        Log.info(
            f"Extracted {len(outcome.attributes)} properties from document "
            f"{document.uuid} ({media_type.type_id})"
        )
        return PipelineResult(outcome=outcome, derived=companion)
