import io
import uuid
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import BinaryIO

from docconvert.extraction.models import ExtractionOutcome, Success

FILENAME = "filename"
PATH = "path"
UUID = "uuid"
MIME_TYPE = "mime.type"
MIME_EXTENSION = "mime.extension"


def _freeze(attributes: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(attributes))


@dataclass(frozen=True)
class SourceDocument:
    """A document handed over by the host for one processing cycle."""

    attributes: Mapping[str, str]
    size_bytes: int
    opener: Callable[[], BinaryIO] = field(repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.size_bytes < 0:
            raise ValueError("size_bytes must be non-negative")
        attributes = dict(self.attributes)
        attributes.setdefault(UUID, str(uuid.uuid4()))
        object.__setattr__(self, "attributes", _freeze(attributes))

    @property
    def filename(self) -> str | None:
        return self.attributes.get(FILENAME) or None

    @property
    def uuid(self) -> str:
        return self.attributes[UUID]

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        """Open the content stream; it is closed when the block exits."""
        stream = self.opener()
        try:
            yield stream
        finally:
            stream.close()

    def read_bytes(self) -> bytes:
        with self.open() as stream:
            return stream.read()

    @classmethod
    def from_bytes(
        cls,
        content: bytes,
        filename: str | None = None,
        attributes: Mapping[str, str] | None = None,
    ) -> "SourceDocument":
        merged = dict(attributes or {})
        if filename is not None:
            merged[FILENAME] = filename
        return cls(attributes=merged, size_bytes=len(content), opener=lambda: io.BytesIO(content))

    @classmethod
    def from_path(
        cls,
        path: Path,
        attributes: Mapping[str, str] | None = None,
    ) -> "SourceDocument":
        merged = {FILENAME: path.name, PATH: str(path.parent)}
        merged.update(attributes or {})
        return cls(
            attributes=merged,
            size_bytes=path.stat().st_size,
            opener=lambda: path.open("rb"),
        )


@dataclass(frozen=True)
class DerivedRecord:
    """A record derived from a source document.

    Each builder method returns a new record. A record without its own
    content shares the parent's content.
    """

    parent: SourceDocument = field(repr=False)
    attributes: Mapping[str, str]
    content: bytes | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", _freeze(self.attributes))

    @classmethod
    def clone(cls, document: SourceDocument) -> "DerivedRecord":
        attributes = dict(document.attributes)
        attributes[UUID] = str(uuid.uuid4())
        return cls(parent=document, attributes=attributes)

    @property
    def filename(self) -> str | None:
        return self.attributes.get(FILENAME) or None

    @property
    def uuid(self) -> str:
        return self.attributes[UUID]

    def with_attribute(self, key: str, value: str | None) -> "DerivedRecord":
        """Set one attribute; a None or empty value leaves the record unchanged."""
        if not value:
            return self
        return replace(self, attributes={**self.attributes, key: value})

    def with_attributes(self, values: Mapping[str, str]) -> "DerivedRecord":
        merged = dict(self.attributes)
        merged.update({key: value for key, value in values.items() if value})
        return replace(self, attributes=merged)

    def with_content(self, content: bytes) -> "DerivedRecord":
        return replace(self, content=content)

    def read_bytes(self) -> bytes:
        if self.content is not None:
            return self.content
        return self.parent.read_bytes()


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of one pipeline run; derived is set only on success."""

    outcome: ExtractionOutcome
    derived: DerivedRecord | None = None

    @property
    def succeeded(self) -> bool:
        return isinstance(self.outcome, Success)

    @property
    def attributes(self) -> Mapping[str, str] | None:
        return self.derived.attributes if self.derived is not None else None
