from docconvert.decoders import metadata as keys
from docconvert.decoders.metadata import Metadata


class TestMetadata:
    def test_set_replaces_values(self) -> None:
        metadata = Metadata()
        metadata.add(keys.TITLE, "one")
        metadata.set(keys.TITLE, "two")
        assert metadata.get_values(keys.TITLE) == ["two"]

    def test_add_accumulates_values(self) -> None:
        metadata = Metadata()
        metadata.add(keys.PARSED_BY, "First")
        metadata.add(keys.PARSED_BY, "Second")
        assert metadata.get(keys.PARSED_BY) == "First"
        assert metadata.get_values(keys.PARSED_BY) == ["First", "Second"]

    def test_missing_name(self) -> None:
        metadata = Metadata()
        assert metadata.get(keys.TITLE) is None
        assert metadata.get_values(keys.TITLE) == []
        assert keys.TITLE not in metadata

    def test_values_are_stringified(self) -> None:
        metadata = Metadata()
        metadata.set(keys.PAGE_COUNT, 3)
        metadata.set(keys.PDF_ENCRYPTED, False)
        metadata.set(keys.TITLE, b"Caf\xc3\xa9")
        assert metadata.get(keys.PAGE_COUNT) == "3"
        assert metadata.get(keys.PDF_ENCRYPTED) == "false"
        assert metadata.get(keys.TITLE) == "Café"

    def test_none_is_kept_as_none(self) -> None:
        metadata = Metadata()
        metadata.set(keys.SUBJECT, None)
        assert keys.SUBJECT in metadata
        assert metadata.get(keys.SUBJECT) is None

    def test_names_keep_insertion_order(self) -> None:
        metadata = Metadata()
        metadata.set(keys.CONTENT_TYPE, "text/plain")
        metadata.set(keys.RESOURCE_NAME, "a.txt")
        assert metadata.names() == [keys.CONTENT_TYPE, keys.RESOURCE_NAME]
        assert list(metadata) == metadata.names()
        assert len(metadata) == 2
