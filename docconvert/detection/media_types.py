"""Media type catalogue used by detection and decoder dispatch.

The repository answers three questions about a media type identifier:
its conventional file extension, its supertype (the more generic type a
decoder for the parent can still read) and which type a filename suggests.
Entries not in the built-in table fall back to the standard ``mimetypes``
registry for extension and filename lookups.
"""

import mimetypes
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import PurePath
from types import MappingProxyType

from docconvert.detection.exceptions import UnknownMediaTypeError

OCTET_STREAM = "application/octet-stream"
TEXT_PLAIN = "text/plain"
APPLICATION_XML = "application/xml"
APPLICATION_ZIP = "application/zip"
OLE_STORAGE = "application/x-tika-msoffice"

PDF = "application/pdf"
RTF = "application/rtf"
MSWORD = "application/msword"
MS_EXCEL = "application/vnd.ms-excel"
MS_POWERPOINT = "application/vnd.ms-powerpoint"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOCM = "application/vnd.ms-word.document.macroenabled.12"
DOTX = "application/vnd.openxmlformats-officedocument.wordprocessingml.template"
XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PPTX = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
ODT = "application/vnd.oasis.opendocument.text"
ODS = "application/vnd.oasis.opendocument.spreadsheet"
ODP = "application/vnd.oasis.opendocument.presentation"
EPUB = "application/epub+zip"

_MEDIA_TYPE_PATTERN = re.compile(r"^[\w.+-]+/[\w.+-]+$")


@dataclass(frozen=True)
class MediaTypeDescriptor:
    """Detected media type and its conventional extension (may be unknown)."""

    type_id: str
    file_extension: str | None = None


@dataclass(frozen=True)
class MediaTypeInfo:
    type_id: str
    extensions: tuple[str, ...] = ()
    supertype: str | None = None


_KNOWN_TYPES: tuple[MediaTypeInfo, ...] = (
    MediaTypeInfo(OCTET_STREAM, ()),
    MediaTypeInfo(TEXT_PLAIN, (".txt", ".text"), OCTET_STREAM),
    MediaTypeInfo("text/csv", (".csv",), TEXT_PLAIN),
    MediaTypeInfo("text/tab-separated-values", (".tsv",), TEXT_PLAIN),
    MediaTypeInfo("text/markdown", (".md", ".markdown"), TEXT_PLAIN),
    MediaTypeInfo("text/html", (".html", ".htm"), TEXT_PLAIN),
    MediaTypeInfo(APPLICATION_XML, (".xml",), TEXT_PLAIN),
    MediaTypeInfo("application/json", (".json",), TEXT_PLAIN),
    MediaTypeInfo(PDF, (".pdf",), OCTET_STREAM),
    MediaTypeInfo(RTF, (".rtf",), TEXT_PLAIN),
    MediaTypeInfo(OLE_STORAGE, (), OCTET_STREAM),
    MediaTypeInfo(MSWORD, (".doc", ".dot"), OLE_STORAGE),
    MediaTypeInfo(MS_EXCEL, (".xls",), OLE_STORAGE),
    MediaTypeInfo(MS_POWERPOINT, (".ppt",), OLE_STORAGE),
    MediaTypeInfo(APPLICATION_ZIP, (".zip",), OCTET_STREAM),
    MediaTypeInfo(DOCX, (".docx",), APPLICATION_ZIP),
    MediaTypeInfo(DOCM, (".docm",), DOCX),
    MediaTypeInfo(DOTX, (".dotx",), DOCX),
    MediaTypeInfo(XLSX, (".xlsx",), APPLICATION_ZIP),
    MediaTypeInfo(PPTX, (".pptx",), APPLICATION_ZIP),
    MediaTypeInfo(ODT, (".odt",), APPLICATION_ZIP),
    MediaTypeInfo(ODS, (".ods",), APPLICATION_ZIP),
    MediaTypeInfo(ODP, (".odp",), APPLICATION_ZIP),
    MediaTypeInfo(EPUB, (".epub",), APPLICATION_ZIP),
    MediaTypeInfo("application/gzip", (".gz",), OCTET_STREAM),
    MediaTypeInfo("image/png", (".png",), OCTET_STREAM),
    MediaTypeInfo("image/jpeg", (".jpg", ".jpeg"), OCTET_STREAM),
    MediaTypeInfo("image/gif", (".gif",), OCTET_STREAM),
)


def base_type(type_id: str) -> str:
    """Strip parameters and normalise case: 'Text/Plain; charset=UTF-8' -> 'text/plain'."""
    return type_id.split(";", 1)[0].strip().lower()


class MediaTypeRepository:
    """Read-only catalogue of media types; safe to share between threads."""

    def __init__(self, types: tuple[MediaTypeInfo, ...] = _KNOWN_TYPES) -> None:
        self._types: Mapping[str, MediaTypeInfo] = MappingProxyType(
            {info.type_id: info for info in types}
        )
        by_suffix: dict[str, str] = {}
        for info in types:
            for extension in info.extensions:
                by_suffix.setdefault(extension, info.type_id)
        self._by_suffix: Mapping[str, str] = MappingProxyType(by_suffix)

    def __contains__(self, type_id: str) -> bool:
        return base_type(type_id) in self._types

    def extension_for(self, type_id: str) -> str | None:
        """Return the conventional extension (with leading dot) or None.

        Raises:
            UnknownMediaTypeError: if type_id is not a valid media type.
        """
        key = self._validate(type_id)
        info = self._types.get(key)
        if info is not None:
            return info.extensions[0] if info.extensions else None
        return mimetypes.guess_extension(key, strict=False)

    def type_for_filename(self, filename: str | None) -> str | None:
        if not filename:
            return None
        suffix = PurePath(filename).suffix.lower()
        if suffix in self._by_suffix:
            return self._by_suffix[suffix]
        guessed, _encoding = mimetypes.guess_type(filename, strict=False)
        return base_type(guessed) if guessed else None

    def supertype(self, type_id: str) -> str | None:
        key = base_type(type_id)
        info = self._types.get(key)
        if info is not None:
            return info.supertype
        if key == OCTET_STREAM:
            return None
        if key.startswith("text/"):
            return TEXT_PLAIN
        if key.endswith("+xml"):
            return APPLICATION_XML
        if key.endswith("+zip"):
            return APPLICATION_ZIP
        return OCTET_STREAM

    def lineage(self, type_id: str) -> Iterator[str]:
        """Yield the type itself followed by each supertype up to the root."""
        current: str | None = base_type(type_id)
        seen: set[str] = set()
        while current is not None and current not in seen:
            seen.add(current)
            yield current
            current = self.supertype(current)

    def is_specialization(self, candidate: str, parent: str) -> bool:
        """True when candidate is a strict subtype of parent."""
        candidate, parent = base_type(candidate), base_type(parent)
        return candidate != parent and parent in self.lineage(candidate)

    def _validate(self, type_id: str) -> str:
        key = base_type(type_id or "")
        if not _MEDIA_TYPE_PATTERN.match(key):
            raise UnknownMediaTypeError(f"Invalid media type '{type_id}'")
        return key
