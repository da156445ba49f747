class DetectionError(Exception):
    """Raised when a document stream cannot be read for media type detection."""


class UnknownMediaTypeError(DetectionError):
    """Raised when a media type identifier is not syntactically valid."""
