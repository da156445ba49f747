from collections.abc import Iterable, Mapping
from types import MappingProxyType

from docconvert.decoders.base import BaseDecoder
from docconvert.decoders.empty import EmptyDecoder
from docconvert.detection.media_types import MediaTypeRepository


class DecoderRegistry:
    """Immutable lookup from media type to decoder.

    The first registered decoder for a type wins. Lookup walks the type's
    lineage (the type, then its supertypes) so a text/plain decoder also
    serves text/csv; types with no capable decoder get the fallback.
    """

    def __init__(
        self,
        decoders: Iterable[BaseDecoder],
        repository: MediaTypeRepository | None = None,
        fallback: BaseDecoder | None = None,
    ) -> None:
        self._repository = repository if repository is not None else MediaTypeRepository()
        self._fallback = fallback if fallback is not None else EmptyDecoder()
        by_type: dict[str, BaseDecoder] = {}
        for decoder in decoders:
            for type_id in decoder.supported_types:
                by_type.setdefault(type_id, decoder)
        self._by_type: Mapping[str, BaseDecoder] = MappingProxyType(by_type)

    @property
    def supported_types(self) -> frozenset[str]:
        return frozenset(self._by_type)

    def decoder_for(self, type_id: str) -> BaseDecoder:
        for candidate in self._repository.lineage(type_id):
            decoder = self._by_type.get(candidate)
            if decoder is not None:
                return decoder
        return self._fallback
