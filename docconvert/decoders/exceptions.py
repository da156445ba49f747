class DecoderError(Exception):
    """Raised when a decoder cannot parse a document."""


class EncryptedDocumentError(DecoderError):
    """Raised when a document is encrypted and no valid password is available."""


class WriteLimitReachedError(DecoderError):
    """Raised when extracted text exceeds the configured write limit."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"Extracted text exceeds the write limit of {limit} characters")
        self.limit = limit
