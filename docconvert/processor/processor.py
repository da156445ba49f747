from dataclasses import dataclass

from docconvert.config.settings import Settings
from docconvert.decoders.factory import DecoderRegistryFactory
from docconvert.detection.detector import MediaTypeDetector
from docconvert.detection.media_types import MediaTypeRepository
from docconvert.extraction.engine import ExtractionEngine
from docconvert.extraction.models import ExtractionLimits, Failure
from docconvert.logging.logger import Log
from docconvert.processor.base import BasePipeline
from docconvert.processor.conversion import ConversionPipeline
from docconvert.processor.metadata import MetadataPipeline
from docconvert.processor.models import SourceDocument
from docconvert.processor.routing import ResultRouter, Transfer

PIPELINES: dict[str, type[BasePipeline]] = {
    "convert": ConversionPipeline,
    "metadata": MetadataPipeline,
}


@dataclass(frozen=True)
class Processor:
    """Runs the configured pipeline for one document and routes the result.

    Built once at startup and shared read-only by every invocation.
    """

    pipeline: BasePipeline
    router: ResultRouter
    limits: ExtractionLimits

    def process(self, document: SourceDocument) -> list[Transfer]:
        Log.info(f"Processing document {document.uuid} ({document.size_bytes} bytes)")
        result = self.pipeline.run(document, self.limits)
        if isinstance(result.outcome, Failure):
            Log.warning(
                f"Document {document.uuid} routed to failure: "
                f"{result.outcome.reason.value} {result.outcome.message}".rstrip()
            )
        return self.router.route(document, result)


def build_processor(settings: Settings) -> Processor:
    """Build a Processor with the detector, decoders and limits from settings."""
    pipeline_cls = PIPELINES.get(settings.pipeline_mode)
    if pipeline_cls is None:
        raise ValueError(
            f"Unknown pipeline mode '{settings.pipeline_mode}'. Choose from: {list(PIPELINES)}"
        )
    repository = MediaTypeRepository()
    detector = MediaTypeDetector(repository)
    engine = ExtractionEngine(DecoderRegistryFactory.create(settings, repository))
    return Processor(
        pipeline=pipeline_cls(detector, engine),
        router=ResultRouter(),
        limits=ExtractionLimits.from_settings(settings),
    )
