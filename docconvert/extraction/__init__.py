from docconvert.extraction.engine import ExtractionEngine
from docconvert.extraction.models import (
    ExtractionLimits,
    ExtractionOutcome,
    Failure,
    FailureReason,
    Success,
)
from docconvert.extraction.normalization import normalize_properties

__all__ = [
    "ExtractionEngine",
    "ExtractionLimits",
    "ExtractionOutcome",
    "Failure",
    "FailureReason",
    "Success",
    "normalize_properties",
]
