from docconvert.config.settings import Settings
from docconvert.logging.logger import Log
from docconvert.processor.file_loader import FileLoader
from docconvert.processor.processor import Processor
from docconvert.processor.routing import Disposition
from docconvert.worker.inbox import Inbox
from docconvert.worker.models import Job
from docconvert.worker.outbox import Outbox


class JobRunner:
    """Run one job, catch exceptions, and apply retry logic."""

    def __init__(
        self,
        processor: Processor,
        file_loader: FileLoader,
        inbox: Inbox,
        outbox: Outbox,
        settings: Settings,
    ) -> None:
        self._processor = processor
        self._file_loader = file_loader
        self._inbox = inbox
        self._outbox = outbox
        self._settings = settings

    def run(self, job: Job) -> None:
        """Process a claimed file and commit its routed records."""
        Log.info(f"Running job {job.name} (attempt {job.attempts + 1})")
        try:
            document = self._file_loader.load(job)
            transfers = self._processor.process(document)
            self._outbox.commit(transfers)
            self._inbox.complete(job)
            routed = ", ".join(transfer.disposition.value for transfer in transfers)
            Log.info(f"Job {job.name} completed: {routed}")
        except Exception as exc:
            self._handle_failure(job, exc)

    def _handle_failure(self, job: Job, exc: Exception) -> None:
        """Release the file for retry; quarantine it once attempts are exhausted."""
        Log.error(f"Job {job.name} failed: {exc}")
        if job.attempts + 1 >= self._settings.max_job_attempts:
            self._inbox.reject(job, self._outbox.channel(Disposition.FAILURE))
            Log.error(f"Job {job.name} permanently failed after {job.attempts + 1} attempts")
        else:
            self._inbox.release(job)
            Log.warning(f"Job {job.name} will be retried (attempt {job.attempts + 1})")
