from datetime import datetime
from typing import BinaryIO

import docx
from docx.opc.coreprops import CoreProperties

from docconvert.decoders import metadata as keys
from docconvert.decoders.base import BaseDecoder, DecodeContext
from docconvert.decoders.exceptions import DecoderError
from docconvert.decoders.metadata import Metadata
from docconvert.decoders.sink import TextSink
from docconvert.detection.media_types import DOCM, DOCX, DOTX


class WordprocessingDecoder(BaseDecoder):
    """Decodes OOXML Word documents with python-docx.

    Body paragraphs come first, then table rows with cells separated by tabs.
    """

    name = "WordprocessingDecoder"
    supported_types = frozenset({DOCX, DOCM, DOTX})

    def decode(
        self,
        stream: BinaryIO,
        sink: TextSink,
        metadata: Metadata,
        context: DecodeContext,
    ) -> None:
        try:
            document = docx.Document(stream)
            self._read_properties(document.core_properties, metadata)
            for paragraph in document.paragraphs:
                sink.write_block(paragraph.text)
            for table in document.tables:
                for row in table.rows:
                    sink.write_block("\t".join(cell.text.strip() for cell in row.cells))
        except DecoderError:
            raise
        except Exception as exc:
            raise DecoderError(f"python-docx decoding failed: {exc}") from exc

    def _read_properties(self, props: CoreProperties, metadata: Metadata) -> None:
        metadata.set(keys.TITLE, props.title)
        metadata.set(keys.CREATOR, props.author)
        metadata.set(keys.SUBJECT, props.subject)
        metadata.set(keys.KEYWORDS, props.keywords)
        metadata.set(keys.DESCRIPTION, props.comments)
        metadata.set(keys.CATEGORY, props.category)
        metadata.set(keys.LAST_AUTHOR, props.last_modified_by)
        metadata.set(keys.CREATED, _iso(props.created))
        metadata.set(keys.MODIFIED, _iso(props.modified))
        if props.revision:
            metadata.set(keys.REVISION, props.revision)


def _iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")
