from docconvert.config.settings import Settings
from docconvert.logging.logger import Log
from docconvert.processor.file_loader import FileLoader
from docconvert.processor.processor import build_processor
from docconvert.worker.inbox import Inbox
from docconvert.worker.job_runner import JobRunner
from docconvert.worker.outbox import Outbox
from docconvert.worker.worker import Worker


def main() -> None:
    """Entry point: load settings -> build processor -> start worker loop."""
    settings = Settings()
    Log.configure(settings.log_level)
    Log.info(f"Starting docconvert in '{settings.pipeline_mode}' mode ({settings.app_env})")

    settings.inbox_dir.mkdir(parents=True, exist_ok=True)
    processor = build_processor(settings)
    inbox = Inbox(settings.inbox_dir)
    outbox = Outbox(settings.outbox_dir)
    job_runner = JobRunner(processor, FileLoader(), inbox, outbox, settings)
    worker = Worker(inbox, job_runner, settings)
    worker.run()


if __name__ == "__main__":
    main()
