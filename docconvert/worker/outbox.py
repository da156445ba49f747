import json
import shutil
from pathlib import Path

from docconvert.logging.logger import Log
from docconvert.processor.models import FILENAME
from docconvert.processor.routing import Disposition, Transfer
from docconvert.worker.exceptions import OutboxError

ATTRIBUTES_FILE = "attributes.json"
DEFAULT_NAME = "content"


class Outbox:
    """Commits routed records to <root>/<disposition>/<uuid>/.

    A commit either writes every transfer or nothing: on error the entries
    already written for the same commit are removed.
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    def channel(self, disposition: Disposition) -> Path:
        return self._root / disposition.value

    def commit(self, transfers: list[Transfer]) -> list[Path]:
        written: list[Path] = []
        try:
            for transfer in transfers:
                written.append(self._write(transfer))
        except Exception as exc:
            for entry in written:
                shutil.rmtree(entry, ignore_errors=True)
            raise OutboxError(f"Failed to commit {len(transfers)} records: {exc}") from exc
        Log.debug(f"Committed {len(written)} records to {self._root}")
        return written

    def _write(self, transfer: Transfer) -> Path:
        record = transfer.record
        entry = self.channel(transfer.disposition) / record.uuid
        entry.mkdir(parents=True, exist_ok=False)
        try:
            name = Path(record.attributes.get(FILENAME) or DEFAULT_NAME).name
            (entry / name).write_bytes(record.read_bytes())
            (entry / ATTRIBUTES_FILE).write_text(
                json.dumps(dict(record.attributes), indent=2, sort_keys=True),
                encoding="utf-8",
            )
        except Exception:
            shutil.rmtree(entry, ignore_errors=True)
            raise
        return entry
