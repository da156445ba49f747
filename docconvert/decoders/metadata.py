"""Decoder property bag and the property names decoders report."""

from collections.abc import Iterator

RESOURCE_NAME = "resourceName"
CONTENT_TYPE = "Content-Type"
CONTENT_ENCODING = "Content-Encoding"
PARSED_BY = "X-Parsed-By"

TITLE = "dc:title"
CREATOR = "dc:creator"
SUBJECT = "dc:subject"
DESCRIPTION = "dc:description"
KEYWORDS = "meta:keyword"
LAST_AUTHOR = "meta:last-author"
INITIAL_AUTHOR = "meta:initial-author"
CREATED = "dcterms:created"
MODIFIED = "dcterms:modified"
REVISION = "cp:revision"
CATEGORY = "cp:category"
COMPANY = "extended-properties:Company"
APPLICATION = "extended-properties:Application"
PAGE_COUNT = "xmpTPg:NPages"
WORD_COUNT = "meta:word-count"
CHARACTER_COUNT = "meta:character-count"
PARAGRAPH_COUNT = "meta:paragraph-count"

CREATOR_TOOL = "xmp:CreatorTool"
PDF_PRODUCER = "pdf:producer"
PDF_VERSION = "pdf:PDFVersion"
PDF_ENCRYPTED = "pdf:encrypted"


class Metadata:
    """Multi-valued property bag filled in by decoders.

    Values may be None or empty; normalization decides what survives.
    """

    def __init__(self) -> None:
        self._values: dict[str, list[str | None]] = {}

    def add(self, name: str, value: object) -> None:
        self._values.setdefault(name, []).append(_to_str(value))

    def set(self, name: str, value: object) -> None:
        self._values[name] = [_to_str(value)]

    def get(self, name: str) -> str | None:
        values = self._values.get(name)
        return values[0] if values else None

    def get_values(self, name: str) -> list[str | None]:
        return list(self._values.get(name, []))

    def names(self) -> list[str]:
        return list(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)


def _to_str(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
