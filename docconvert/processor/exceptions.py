class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class DocumentReadError(ProcessorError):
    """Raised when a document file cannot be read from disk."""
