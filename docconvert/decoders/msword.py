"""Legacy Word 97-2003 (.doc) decoding.

Properties come from the OLE2 SummaryInformation streams via olefile. Body
text is rebuilt from the piece table (CLX) referenced by the File
Information Block at the start of the WordDocument stream.
"""

import re
import struct
from datetime import datetime
from typing import BinaryIO

import olefile

from docconvert.decoders import metadata as keys
from docconvert.decoders.base import BaseDecoder, DecodeContext
from docconvert.decoders.exceptions import DecoderError, EncryptedDocumentError
from docconvert.decoders.metadata import Metadata
from docconvert.decoders.sink import TextSink
from docconvert.detection.media_types import MSWORD

WORD_IDENT = 0xA5EC
FIB_FLAGS_OFFSET = 0x0A
FIB_CCP_TEXT_OFFSET = 0x4C
FLAG_ENCRYPTED = 0x0100
FLAG_WHICH_TABLE = 0x0200
FC_CLX_INDEX = 33
FC_COMPRESSED = 0x40000000

_FIELD_INSTRUCTION = re.compile("\x13[^\x13\x14\x15]*\x14")
_FIELD_MARKS = re.compile("[\x13\x14\x15]")
_CONTROL_CHARS = re.compile("[\x00-\x08\x0e-\x1f]")
_TRANSLATION = str.maketrans({"\r": "\n", "\x0b": "\n", "\x0c": "\n", "\x07": "\t"})


class MsWordDecoder(BaseDecoder):
    """Decodes Word 97-2003 binary documents with olefile."""

    name = "MsWordDecoder"
    supported_types = frozenset({MSWORD})

    def decode(
        self,
        stream: BinaryIO,
        sink: TextSink,
        metadata: Metadata,
        context: DecodeContext,
    ) -> None:
        try:
            with olefile.OleFileIO(stream.read()) as ole:
                self._read_properties(ole.get_metadata(), metadata)
                if not ole.exists("WordDocument"):
                    raise DecoderError("OLE2 storage has no WordDocument stream")
                word_stream = ole.openstream("WordDocument").read()
                table_name = _table_stream_name(word_stream)
                if not ole.exists(table_name):
                    raise DecoderError(f"Missing table stream {table_name}")
                table_stream = ole.openstream(table_name).read()
            for line in extract_word_text(word_stream, table_stream).split("\n"):
                sink.write_block(line)
        except DecoderError:
            raise
        except Exception as exc:
            raise DecoderError(f"olefile decoding failed: {exc}") from exc

    def _read_properties(self, props: olefile.OleMetadata, metadata: Metadata) -> None:
        metadata.set(keys.TITLE, _text(props.title))
        metadata.set(keys.SUBJECT, _text(props.subject))
        metadata.set(keys.CREATOR, _text(props.author))
        metadata.set(keys.KEYWORDS, _text(props.keywords))
        metadata.set(keys.DESCRIPTION, _text(props.comments))
        metadata.set(keys.LAST_AUTHOR, _text(props.last_saved_by))
        metadata.set(keys.REVISION, _text(props.revision_number))
        metadata.set(keys.APPLICATION, _text(props.creating_application))
        metadata.set(keys.COMPANY, _text(props.company))
        metadata.set(keys.CATEGORY, _text(props.category))
        metadata.set(keys.CREATED, _iso(props.create_time))
        metadata.set(keys.MODIFIED, _iso(props.last_saved_time))
        for key, value in (
            (keys.PAGE_COUNT, props.num_pages),
            (keys.WORD_COUNT, props.num_words),
            (keys.CHARACTER_COUNT, props.num_chars),
        ):
            if value:
                metadata.set(key, value)


def extract_word_text(word_stream: bytes, table_stream: bytes) -> str:
    """Rebuild the main document text from a WordDocument and table stream pair.

    Raises:
        DecoderError: if the streams are not a readable Word 97+ document.
        EncryptedDocumentError: if the document is encrypted.
    """
    if len(word_stream) < 0x20 or _u16(word_stream, 0) != WORD_IDENT:
        raise DecoderError("WordDocument stream has no valid FIB")
    if _u16(word_stream, FIB_FLAGS_OFFSET) & FLAG_ENCRYPTED:
        raise EncryptedDocumentError("Encrypted Word documents are not supported")

    ccp_text = _u32(word_stream, FIB_CCP_TEXT_OFFSET)
    fc_clx, lcb_clx = _clx_location(word_stream)
    clx = table_stream[fc_clx:fc_clx + lcb_clx]
    if len(clx) != lcb_clx or lcb_clx == 0:
        raise DecoderError("Piece table is outside the table stream")

    pieces = []
    for cp_start, cp_end, fc in _read_piece_table(clx):
        count = cp_end - cp_start
        if fc & FC_COMPRESSED:
            offset = (fc & ~FC_COMPRESSED) // 2
            pieces.append(word_stream[offset:offset + count].decode("cp1252", errors="replace"))
        else:
            pieces.append(word_stream[fc:fc + 2 * count].decode("utf-16-le", errors="replace"))
    return _clean("".join(pieces)[:ccp_text])


def _table_stream_name(word_stream: bytes) -> str:
    if len(word_stream) < FIB_FLAGS_OFFSET + 2:
        raise DecoderError("WordDocument stream is truncated")
    return "1Table" if _u16(word_stream, FIB_FLAGS_OFFSET) & FLAG_WHICH_TABLE else "0Table"


def _clx_location(word_stream: bytes) -> tuple[int, int]:
    position = 0x20
    csw = _u16(word_stream, position)
    position += 2 + csw * 2
    cslw = _u16(word_stream, position)
    position += 2 + cslw * 4
    cb_rg_fc_lcb = _u16(word_stream, position)
    position += 2
    if cb_rg_fc_lcb <= FC_CLX_INDEX:
        raise DecoderError("FIB does not reference a piece table")
    entry = position + FC_CLX_INDEX * 8
    return _u32(word_stream, entry), _u32(word_stream, entry + 4)


def _read_piece_table(clx: bytes) -> list[tuple[int, int, int]]:
    position = 0
    # skip Prc (property modifier) entries
    while position < len(clx) and clx[position] == 0x01:
        position += 3 + _u16(clx, position + 1)
    if position >= len(clx) or clx[position] != 0x02:
        raise DecoderError("CLX has no piece table")
    lcb = _u32(clx, position + 1)
    plc = clx[position + 5:position + 5 + lcb]
    count = (lcb - 4) // 12
    if count <= 0 or len(plc) < lcb:
        raise DecoderError("Piece table is empty or truncated")
    cps = [_u32(plc, index * 4) for index in range(count + 1)]
    descriptors = (count + 1) * 4
    return [
        (cps[index], cps[index + 1], _u32(plc, descriptors + index * 8 + 2))
        for index in range(count)
    ]


def _clean(text: str) -> str:
    text = _FIELD_INSTRUCTION.sub("", text)
    text = _FIELD_MARKS.sub("", text)
    text = text.translate(_TRANSLATION)
    return _CONTROL_CHARS.sub("", text)


def _u16(data: bytes, offset: int) -> int:
    try:
        return struct.unpack_from("<H", data, offset)[0]
    except struct.error as exc:
        raise DecoderError(f"Unexpected end of data at offset {offset}") from exc


def _u32(data: bytes, offset: int) -> int:
    try:
        return struct.unpack_from("<I", data, offset)[0]
    except struct.error as exc:
        raise DecoderError(f"Unexpected end of data at offset {offset}") from exc


def _iso(value: datetime | None) -> str | None:
    if not isinstance(value, datetime):
        return None
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def _text(value: object) -> object:
    # SummaryInformation strings are stored in the document code page
    if isinstance(value, bytes):
        return value.decode("cp1252", errors="replace").rstrip("\x00")
    return value
