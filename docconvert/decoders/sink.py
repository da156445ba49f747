from docconvert.decoders.exceptions import WriteLimitReachedError


class TextSink:
    """Accumulates decoded body text up to an optional character limit.

    A negative limit means unbounded. Writing past the limit keeps the text
    that fits and raises WriteLimitReachedError.
    """

    def __init__(self, write_limit: int = -1) -> None:
        self._write_limit = write_limit
        self._parts: list[str] = []
        self._length = 0

    def write(self, text: str) -> None:
        if not text:
            return
        if 0 <= self._write_limit < self._length + len(text):
            remaining = self._write_limit - self._length
            self._append(text[:remaining])
            raise WriteLimitReachedError(self._write_limit)
        self._append(text)

    def write_block(self, text: str) -> None:
        """Write a paragraph-like block, separated from earlier blocks by a newline."""
        text = text.strip()
        if not text:
            return
        if self._length:
            self.write("\n")
        self.write(text)

    def getvalue(self) -> str:
        return "".join(self._parts)

    def __len__(self) -> int:
        return self._length

    def _append(self, text: str) -> None:
        if text:
            self._parts.append(text)
            self._length += len(text)
