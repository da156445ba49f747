import re
from typing import BinaryIO

from striprtf.striprtf import rtf_to_text

from docconvert.decoders import metadata as keys
from docconvert.decoders.base import BaseDecoder, DecodeContext
from docconvert.decoders.exceptions import DecoderError
from docconvert.decoders.metadata import Metadata
from docconvert.decoders.sink import TextSink
from docconvert.detection.media_types import RTF

_INFO_FIELDS: dict[str, str] = {
    "title": keys.TITLE,
    "subject": keys.SUBJECT,
    "author": keys.CREATOR,
    "operator": keys.LAST_AUTHOR,
    "keywords": keys.KEYWORDS,
    "doccomm": keys.DESCRIPTION,
    "category": keys.CATEGORY,
    "company": keys.COMPANY,
}

_INFO_FIELD_PATTERN = re.compile(r"\{\\(" + "|".join(_INFO_FIELDS) + r")\s+([^{}]*)\}")
_INFO_DATE_PATTERN = re.compile(
    r"\{\\(creatim|revtim)((?:\\(?:yr|mo|dy|hr|min|sec)\d+\s*)+)\}"
)
_DATE_PART_PATTERN = re.compile(r"\\(yr|mo|dy|hr|min|sec)(\d+)")


class RtfDecoder(BaseDecoder):
    """Decodes RTF with striprtf; properties come from the \\info group."""

    name = "RtfDecoder"
    supported_types = frozenset({RTF, "text/rtf"})

    def decode(
        self,
        stream: BinaryIO,
        sink: TextSink,
        metadata: Metadata,
        context: DecodeContext,
    ) -> None:
        try:
            content = stream.read().decode("latin-1")
            if not content.lstrip().startswith("{\\rtf"):
                raise DecoderError("Missing RTF header")
            self._read_info(content, metadata)
            for line in rtf_to_text(content, errors="ignore").splitlines():
                sink.write_block(line)
        except DecoderError:
            raise
        except Exception as exc:
            raise DecoderError(f"RTF decoding failed: {exc}") from exc

    def _read_info(self, content: str, metadata: Metadata) -> None:
        for field, value in _INFO_FIELD_PATTERN.findall(content):
            metadata.set(_INFO_FIELDS[field], value.strip())
        for field, parts in _INFO_DATE_PATTERN.findall(content):
            key = keys.CREATED if field == "creatim" else keys.MODIFIED
            metadata.set(key, _format_info_date(parts))


def _format_info_date(parts: str) -> str | None:
    values = {name: int(number) for name, number in _DATE_PART_PATTERN.findall(parts)}
    if "yr" not in values:
        return None
    return (
        f"{values['yr']:04d}-{values.get('mo', 1):02d}-{values.get('dy', 1):02d}"
        f"T{values.get('hr', 0):02d}:{values.get('min', 0):02d}:{values.get('sec', 0):02d}"
    )
