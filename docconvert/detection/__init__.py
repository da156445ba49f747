from docconvert.detection.detector import MediaTypeDetector
from docconvert.detection.exceptions import DetectionError, UnknownMediaTypeError
from docconvert.detection.media_types import MediaTypeDescriptor, MediaTypeRepository

__all__ = [
    "DetectionError",
    "MediaTypeDescriptor",
    "MediaTypeDetector",
    "MediaTypeRepository",
    "UnknownMediaTypeError",
]
