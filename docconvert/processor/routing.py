from dataclasses import dataclass
from enum import Enum

from docconvert.processor.models import DerivedRecord, PipelineResult, SourceDocument


class Disposition(str, Enum):
    ORIGINAL = "original"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class Transfer:
    disposition: Disposition
    record: SourceDocument | DerivedRecord


class ResultRouter:
    """Maps a pipeline result onto the outbound channels.

    On success the original goes to ORIGINAL and the derived record to
    SUCCESS; on failure only the untouched original goes to FAILURE.
    """

    def route(self, document: SourceDocument, result: PipelineResult) -> list[Transfer]:
        if not result.succeeded:
            return [Transfer(Disposition.FAILURE, document)]
        if result.derived is None:
            raise ValueError("Successful pipeline result has no derived record")
        return [
            Transfer(Disposition.ORIGINAL, document),
            Transfer(Disposition.SUCCESS, result.derived),
        ]
