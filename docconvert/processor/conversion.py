from docconvert.extraction.models import ExtractionLimits, Success
from docconvert.logging.logger import Log
from docconvert.processor.base import BasePipeline
from docconvert.processor.models import (
    FILENAME,
    MIME_EXTENSION,
    MIME_TYPE,
    DerivedRecord,
    PipelineResult,
    SourceDocument,
)

TEXT_EXTENSION = ".txt"


class ConversionPipeline(BasePipeline):
    """Converts a document to plain text.

    Pipeline: size check -> detect -> extract -> derived text record.
    """

    require_text = True

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

        extension = media_type.file_extension
        text = DerivedRecord.clone(document)
        text = text.with_attribute(MIME_TYPE, media_type.type_id)
        text = text.with_attribute(MIME_EXTENSION, extension)
        if filename and extension:
            text = text.with_attribute(FILENAME, rename_to_text(filename, extension))
        text = text.with_attributes(outcome.attributes)
        text = text.with_content(outcome.body_text.encode("utf-8"))
        Log.info(
            f"Converted document {document.uuid} ({media_type.type_id}) "
            f"to {len(outcome.body_text)} chars of text"
        )
        return PipelineResult(outcome=outcome, derived=text)


def rename_to_text(filename: str, extension: str) -> str:
    """Replace every occurrence of extension in filename with '.txt'.

    This is a plain substring replacement, so an extension token that also
    appears earlier in the name is rewritten too ("a.pdf.backup.pdf" ->
    "a.txt.backup.txt").
    """
    return filename.replace(extension, TEXT_EXTENSION)
