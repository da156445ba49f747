import time

from docconvert.config.settings import Settings
from docconvert.logging.logger import Log
from docconvert.worker.inbox import Inbox
from docconvert.worker.job_runner import JobRunner
from docconvert.worker.models import Job


class Worker:
    """Drains the inbox into the job runner, one document at a time.

    Documents stranded in the claimed area by an interrupted run are handed
    back to the inbox before the first poll.
    """

    def __init__(
        self,
        inbox: Inbox,
        job_runner: JobRunner,
        settings: Settings,
    ) -> None:
        self._inbox = inbox
        self._job_runner = job_runner
        self._settings = settings

    def run(self, max_jobs: int | None = None) -> int:
        """Process inbox documents until interrupted.

        Returns the number of documents dispatched. ``max_jobs`` bounds the
        run, which lets tests and one-shot invocations stop early.
        """
        self._recover()
        Log.info(f"Watching inbox every {self._settings.job_poll_interval_seconds}s")
        processed = 0
        try:
            while max_jobs is None or processed < max_jobs:
                job = self._next_job()
                if job is None:
                    time.sleep(self._settings.job_poll_interval_seconds)
                    continue
                self._job_runner.run(job)
                processed += 1
        except KeyboardInterrupt:
            Log.info(f"Interrupted after {processed} document(s)")
        return processed

    def _recover(self) -> None:
        try:
            recovered = self._inbox.recover_claimed()
        except OSError as exc:
            Log.warning(f"Could not recover claimed documents: {exc}")
            return
        if recovered:
            Log.warning(f"Returned {recovered} interrupted document(s) to the inbox")

    def _next_job(self) -> Job | None:
        # a vanished or locked file must not stop the loop
        try:
            return self._inbox.claim_next()
        except OSError as exc:
            Log.warning(f"Inbox unavailable, retrying next poll: {exc}")
            return None
