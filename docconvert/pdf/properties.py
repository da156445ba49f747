"""Mapping of PDF document-information entries onto decoder property names."""

import re

from docconvert.decoders import metadata as keys
from docconvert.decoders.metadata import Metadata

DOCINFO_KEYS: dict[str, str] = {
    "title": keys.TITLE,
    "author": keys.CREATOR,
    "subject": keys.SUBJECT,
    "keywords": keys.KEYWORDS,
    "creator": keys.CREATOR_TOOL,
    "producer": keys.PDF_PRODUCER,
    "creationdate": keys.CREATED,
    "moddate": keys.MODIFIED,
}

_DATE_KEYS = {keys.CREATED, keys.MODIFIED}

_PDF_DATE = re.compile(
    r"^(?:D:)?(\d{4})(\d{2})?(\d{2})?(\d{2})?(\d{2})?(\d{2})?"
    r"(?:(Z)|([+-])(\d{2})'?(\d{2})?'?)?"
)


def apply_docinfo(info: dict[str, object], metadata: Metadata) -> None:
    """Copy document-information entries (case-insensitive keys) into metadata."""
    for raw_key, value in info.items():
        key = DOCINFO_KEYS.get(str(raw_key).lower())
        if key is None:
            continue
        text = _as_text(value)
        if key in _DATE_KEYS and text:
            text = format_pdf_date(text)
        metadata.set(key, text)


def format_pdf_date(value: str) -> str:
    """Convert a PDF date string ("D:20240131120000+01'00'") to ISO 8601.

    Unparseable values are returned unchanged.
    """
    match = _PDF_DATE.match(value.strip())
    if match is None:
        return value
    year, month, day, hour, minute, second, zulu, sign, tz_hour, tz_minute = match.groups()
    result = (
        f"{year}-{month or '01'}-{day or '01'}"
        f"T{hour or '00'}:{minute or '00'}:{second or '00'}"
    )
    if sign:
        return f"{result}{sign}{tz_hour}:{tz_minute or '00'}"
    if zulu or hour is None:
        return f"{result}Z"
    return result


def _as_text(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, bytes):
        if value.startswith((b"\xfe\xff", b"\xff\xfe")):
            return value.decode("utf-16", errors="replace")
        return value.decode("latin-1")
    # pdfminer PSLiteral values carry their text in .name
    name = getattr(value, "name", None)
    if isinstance(name, (str, bytes)):
        return _as_text(name)
    return str(value)
