import zipfile
from typing import BinaryIO

import olefile

from docconvert.detection import media_types as mt
from docconvert.detection.exceptions import DetectionError, UnknownMediaTypeError
from docconvert.detection.media_types import MediaTypeDescriptor, MediaTypeRepository
from docconvert.logging.logger import Log

PREFIX_SIZE = 8192

_OLE_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"
_ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06")

_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"%PDF-", mt.PDF),
    (b"{\\rtf", mt.RTF),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"\x1f\x8b", "application/gzip"),
)

_TEXT_BOMS = (b"\xef\xbb\xbf", b"\xff\xfe", b"\xfe\xff")

_OLE_STREAMS: tuple[tuple[str, str], ...] = (
    ("WordDocument", mt.MSWORD),
    ("Workbook", mt.MS_EXCEL),
    ("Book", mt.MS_EXCEL),
    ("PowerPoint Document", mt.MS_POWERPOINT),
)

_OOXML_PARTS: tuple[tuple[str, str], ...] = (
    ("word/", mt.DOCX),
    ("xl/", mt.XLSX),
    ("ppt/", mt.PPTX),
)


class MediaTypeDetector:
    """Sniffs document content to identify its media type.

    Detection looks at magic bytes first and container structure second
    (ZIP entries, OLE2 directory). The filename is only used to refine a
    generic result, never to override what the bytes say.
    """

    def __init__(self, repository: MediaTypeRepository | None = None) -> None:
        self._repository = repository if repository is not None else MediaTypeRepository()

    @property
    def repository(self) -> MediaTypeRepository:
        return self._repository

    def detect(self, stream: BinaryIO, filename: str | None = None) -> MediaTypeDescriptor:
        """Identify the media type of a seekable stream.

        The stream position is restored before returning.

        Raises:
            DetectionError: if the stream cannot be read or is not seekable.
        """
        prefix = self._peek(stream, PREFIX_SIZE)
        sniffed = self._sniff(stream, prefix)
        type_id = self._apply_hint(sniffed, filename)
        Log.debug(f"Detected media type {type_id} (content: {sniffed}, name: {filename})")
        return MediaTypeDescriptor(type_id=type_id, file_extension=self._extension(type_id))

    def _peek(self, stream: BinaryIO, size: int) -> bytes:
        try:
            if not stream.seekable():
                raise DetectionError("Document stream is not seekable")
            position = stream.tell()
            data = stream.read(size)
            stream.seek(position)
        except (OSError, ValueError) as exc:
            raise DetectionError(f"Unable to read document stream: {exc}") from exc
        return data

    def _sniff(self, stream: BinaryIO, prefix: bytes) -> str:
        if not prefix:
            return mt.OCTET_STREAM
        head = prefix.removeprefix(b"\xef\xbb\xbf").lstrip(b" \t\r\n")
        for magic, type_id in _SIGNATURES:
            if head.startswith(magic):
                return type_id
        if prefix.startswith(_OLE_MAGIC):
            return self._sniff_ole(stream)
        if prefix.startswith(_ZIP_MAGICS):
            return self._sniff_zip(stream)
        lowered = head[:256].lower()
        if lowered.startswith((b"<!doctype html", b"<html")):
            return "text/html"
        if lowered.startswith(b"<?xml"):
            return mt.APPLICATION_XML
        if _looks_like_text(prefix):
            return mt.TEXT_PLAIN
        return mt.OCTET_STREAM

    def _sniff_zip(self, stream: BinaryIO) -> str:
        # only the central directory and the small mimetype entry are read
        position = stream.tell()
        try:
            with zipfile.ZipFile(stream) as archive:
                names = archive.namelist()
                if "mimetype" in names:
                    with archive.open("mimetype") as entry:
                        declared = entry.read(256).decode("ascii", "ignore").strip()
                    if declared:
                        return mt.base_type(declared)
        except Exception as exc:
            Log.debug(f"ZIP inspection failed: {exc}")
            return mt.APPLICATION_ZIP
        finally:
            stream.seek(position)
        if "[Content_Types].xml" in names:
            for part_prefix, type_id in _OOXML_PARTS:
                if any(name.startswith(part_prefix) for name in names):
                    return type_id
        return mt.APPLICATION_ZIP

    def _sniff_ole(self, stream: BinaryIO) -> str:
        # the storage is not closed: the caller owns the stream
        position = stream.tell()
        try:
            ole = olefile.OleFileIO(stream)
            for stream_name, type_id in _OLE_STREAMS:
                if ole.exists(stream_name):
                    return type_id
        except Exception as exc:
            Log.debug(f"OLE2 inspection failed: {exc}")
        finally:
            stream.seek(position)
        return mt.OLE_STORAGE

    def _apply_hint(self, sniffed: str, filename: str | None) -> str:
        hinted = self._repository.type_for_filename(filename)
        if hinted and self._repository.is_specialization(hinted, sniffed):
            return hinted
        return sniffed

    def _extension(self, type_id: str) -> str | None:
        try:
            extension = self._repository.extension_for(type_id)
        except UnknownMediaTypeError as exc:
            Log.warning(f"MIME type extension lookup failed: {exc}")
            return None
        if not extension:
            Log.warning(f"MIME type extension is null for {type_id}")
            return None
        return extension


def _looks_like_text(prefix: bytes) -> bool:
    if prefix.startswith(_TEXT_BOMS):
        return True
    if b"\x00" in prefix:
        return False
    control = sum(1 for byte in prefix if byte < 0x20 and byte not in b"\t\n\r\f\x1b")
    return control * 100 <= len(prefix) * 2
