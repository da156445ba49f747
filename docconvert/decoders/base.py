from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import BinaryIO, ClassVar

from docconvert.decoders.metadata import Metadata
from docconvert.decoders.sink import TextSink

PasswordProvider = Callable[[Metadata], str | None]


@dataclass(frozen=True)
class DecodeContext:
    """Per-call decoding options shared with the selected decoder."""

    password_provider: PasswordProvider | None = None

    def password_for(self, metadata: Metadata) -> str | None:
        if self.password_provider is None:
            return None
        return self.password_provider(metadata)


class BaseDecoder(ABC):
    """Contract for all format decoders."""

    name: ClassVar[str] = "base"
    supported_types: ClassVar[frozenset[str]] = frozenset()
    supports_password: ClassVar[bool] = False

    @abstractmethod
    def decode(
        self,
        stream: BinaryIO,
        sink: TextSink,
        metadata: Metadata,
        context: DecodeContext,
    ) -> None:
        """Decode a document, writing body text to sink and properties to metadata.

        Args:
            stream: Seekable stream positioned at the start of the document.
            sink: Receives the extracted body text.
            metadata: Receives document properties.
            context: Decoding options such as the password provider.

        Raises:
            DecoderError: if decoding fails for any reason.
        """
