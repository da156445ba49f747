from collections.abc import Iterator
from typing import BinaryIO

from odf import teletype
from odf.element import Element, Node
from odf.namespaces import DCNS, METANS, TEXTNS
from odf.opendocument import load

from docconvert.decoders import metadata as keys
from docconvert.decoders.base import BaseDecoder, DecodeContext
from docconvert.decoders.exceptions import DecoderError
from docconvert.decoders.metadata import Metadata
from docconvert.decoders.sink import TextSink
from docconvert.detection.media_types import ODP, ODS, ODT

_BLOCK_ELEMENTS = {(TEXTNS, "p"), (TEXTNS, "h")}

_META_ELEMENTS: dict[tuple[str, str], str] = {
    (DCNS, "title"): keys.TITLE,
    (DCNS, "creator"): keys.LAST_AUTHOR,
    (DCNS, "subject"): keys.SUBJECT,
    (DCNS, "description"): keys.DESCRIPTION,
    (DCNS, "date"): keys.MODIFIED,
    (METANS, "initial-creator"): keys.CREATOR,
    (METANS, "creation-date"): keys.CREATED,
    (METANS, "keyword"): keys.KEYWORDS,
    (METANS, "generator"): keys.APPLICATION,
}

_STATISTICS: dict[str, str] = {
    "page-count": keys.PAGE_COUNT,
    "word-count": keys.WORD_COUNT,
    "character-count": keys.CHARACTER_COUNT,
    "paragraph-count": keys.PARAGRAPH_COUNT,
}


class OpenDocumentDecoder(BaseDecoder):
    """Decodes OpenDocument text, spreadsheet and presentation files with odfpy."""

    name = "OpenDocumentDecoder"
    supported_types = frozenset({ODT, ODS, ODP})

    def decode(
        self,
        stream: BinaryIO,
        sink: TextSink,
        metadata: Metadata,
        context: DecodeContext,
    ) -> None:
        try:
            document = load(stream)
            self._read_meta(document.meta, metadata)
            for block in _iter_blocks(document.body):
                sink.write_block(teletype.extractText(block))
        except DecoderError:
            raise
        except Exception as exc:
            raise DecoderError(f"odfpy decoding failed: {exc}") from exc

    def _read_meta(self, meta: Element, metadata: Metadata) -> None:
        for element in getattr(meta, "childNodes", ()):
            qname = getattr(element, "qname", None)
            if qname in _META_ELEMENTS:
                key = _META_ELEMENTS[qname]
                metadata.set(key, teletype.extractText(element).strip())
                # dc:creator is the last editor; fall back to it for the author
                if qname == (DCNS, "creator") and keys.CREATOR not in metadata:
                    metadata.set(keys.CREATOR, teletype.extractText(element).strip())
            elif qname == (METANS, "document-statistic"):
                for (_ns, attribute), value in element.attributes.items():
                    if attribute in _STATISTICS:
                        metadata.set(_STATISTICS[attribute], value)


def _iter_blocks(node: Node) -> Iterator[Element]:
    for child in getattr(node, "childNodes", ()):
        if getattr(child, "qname", None) in _BLOCK_ELEMENTS:
            yield child
        else:
            yield from _iter_blocks(child)
