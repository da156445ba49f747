from dataclasses import dataclass, field
from enum import Enum

from docconvert.config.settings import Settings

DEFAULT_MAX_INPUT_BYTES = 1024 * 1024


class FailureReason(str, Enum):
    DETECTION_ERROR = "detection_error"
    EXCEEDS_SIZE_LIMIT = "exceeds_size_limit"
    DECODE_ERROR = "decode_error"
    EMPTY_RESULT = "empty_result"


@dataclass(frozen=True)
class ExtractionLimits:
    """Bounds and secrets for one pipeline invocation.

    A non-positive max_input_bytes disables both the input size check and
    the body text cap.
    """

    max_input_bytes: int = DEFAULT_MAX_INPUT_BYTES
    decode_password: str | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.decode_password is not None and not self.decode_password:
            raise ValueError("decode_password must not be empty when set")

    @property
    def write_limit(self) -> int:
        return self.max_input_bytes if self.max_input_bytes > 0 else -1

    def exceeds(self, size_bytes: int) -> bool:
        return self.max_input_bytes > 0 and size_bytes > self.max_input_bytes

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExtractionLimits":
        password = settings.pdf_password
        return cls(
            max_input_bytes=settings.max_file_size_bytes,
            decode_password=password.get_secret_value() if password is not None else None,
        )


@dataclass(frozen=True)
class Success:
    body_text: str
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Failure:
    reason: FailureReason
    message: str = ""


ExtractionOutcome = Success | Failure
