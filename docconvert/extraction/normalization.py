from collections.abc import Mapping

from docconvert.decoders.metadata import Metadata


def normalize_properties(properties: Metadata | Mapping[str, object]) -> dict[str, str]:
    """Flatten a property bag into an attribute map.

    Only properties with a non-empty value are kept. Multi-valued
    properties contribute their first value.
    """
    attributes: dict[str, str] = {}
    if isinstance(properties, Metadata):
        items = ((name, properties.get(name)) for name in properties.names())
    else:
        items = properties.items()
    for name, value in items:
        if value is None:
            continue
        text = value if isinstance(value, str) else str(value)
        if text:
            attributes[name] = text
    return attributes
