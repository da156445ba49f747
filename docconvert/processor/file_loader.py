from pathlib import Path

from docconvert.processor.exceptions import DocumentReadError
from docconvert.processor.models import FILENAME, SourceDocument
from docconvert.worker.models import Job


class FileLoader:
    """Turns a claimed inbox file into a SourceDocument."""

    def load(self, job: Job) -> SourceDocument:
        """Describe the claimed file without reading its content.

        Raises:
            FileNotFoundError: if the claimed file no longer exists.
            DocumentReadError: if the path is not a regular file.
        """
        path = job.path
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        if not path.is_file():
            raise DocumentReadError(f"Not a regular file: {path}")
        return SourceDocument.from_path(path, attributes={FILENAME: job.name})
