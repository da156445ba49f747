import shutil
from pathlib import Path

from docconvert.logging.logger import Log
from docconvert.worker.models import Job

CLAIMED_DIR = ".claimed"


class Inbox:
    """Directory of incoming documents.

    Claiming moves a file into a hidden sub-directory so a crashed run never
    loses it and a second poll never picks it up again.
    """

    def __init__(self, root: Path) -> None:
        self._root = root
        self._claimed = root / CLAIMED_DIR
        self._attempts: dict[str, int] = {}

    def recover_claimed(self) -> int:
        """Move files left in the claimed area back into the inbox.

        A claimed file whose name is taken by a newer upload stays where it
        is. Returns the number of files moved.
        """
        if not self._claimed.is_dir():
            return 0
        recovered = 0
        for path in sorted(self._claimed.iterdir()):
            if not path.is_file():
                continue
            target = self._root / path.name
            if target.exists():
                Log.warning(f"Leaving {path.name} claimed, the inbox already has a file by that name")
                continue
            path.rename(target)
            recovered += 1
        return recovered

    def claim_next(self) -> Job | None:
        self._claimed.mkdir(parents=True, exist_ok=True)
        candidates = sorted(
            (path for path in self._root.iterdir() if path.is_file() and not path.name.startswith(".")),
            key=lambda path: (path.stat().st_mtime, path.name),
        )
        if not candidates:
            return None
        source = candidates[0]
        claimed = self._claimed / source.name
        source.rename(claimed)
        return Job(path=claimed, name=source.name, attempts=self._attempts.get(source.name, 0))

    def complete(self, job: Job) -> None:
        job.path.unlink(missing_ok=True)
        self._attempts.pop(job.name, None)

    def release(self, job: Job) -> None:
        """Return a claimed file to the inbox for another attempt."""
        self._attempts[job.name] = job.attempts + 1
        job.path.rename(self._root / job.name)

    def reject(self, job: Job, destination: Path) -> Path:
        """Move a claimed file that exhausted its attempts out of the inbox."""
        destination.mkdir(parents=True, exist_ok=True)
        target = destination / job.name
        shutil.move(str(job.path), target)
        self._attempts.pop(job.name, None)
        Log.warning(f"Quarantined {job.name} in {destination}")
        return target
