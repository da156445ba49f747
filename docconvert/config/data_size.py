import re

_UNITS: dict[str, int] = {
    "B": 1,
    "KB": 1024,
    "MB": 1024**2,
    "GB": 1024**3,
    "TB": 1024**4,
}

_DATA_SIZE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([KMGT]?B)?\s*$", re.IGNORECASE)


def parse_data_size(value: str | int) -> int:
    """Convert a data size such as "1MB", "512 KB" or "2048" into bytes.

    Units are 1024-based. A bare number is a byte count.

    Raises:
        ValueError: if the value is not a recognised data size.
    """
    if isinstance(value, int):
        return value
    match = _DATA_SIZE_PATTERN.match(value)
    if match is None:
        raise ValueError(f"'{value}' is not a valid data size")
    number, unit = match.groups()
    return int(float(number) * _UNITS[(unit or "B").upper()])
