import json
from pathlib import Path

import pytest

from docconvert.config.settings import Settings
from docconvert.processor.file_loader import FileLoader
from docconvert.processor.processor import build_processor
from docconvert.worker.inbox import CLAIMED_DIR, Inbox
from docconvert.worker.job_runner import JobRunner
from docconvert.worker.outbox import ATTRIBUTES_FILE, Outbox
from docconvert.worker.worker import Worker


def _make_worker(settings: Settings) -> Worker:
    settings.inbox_dir.mkdir(parents=True, exist_ok=True)
    inbox = Inbox(settings.inbox_dir)
    outbox = Outbox(settings.outbox_dir)
    job_runner = JobRunner(build_processor(settings), FileLoader(), inbox, outbox, settings)
    return Worker(inbox, job_runner, settings)


def _entries(root: Path) -> list[Path]:
    return sorted(root.iterdir()) if root.exists() else []


@pytest.mark.integration
class TestWorkerIntegration:
    def test_worker_converts_one_document(self, test_settings: Settings, sample_pdf_bytes: bytes) -> None:
        worker = _make_worker(test_settings)
        (test_settings.inbox_dir / "report.pdf").write_bytes(sample_pdf_bytes)

        worker.run(max_jobs=1)

        (original,) = _entries(test_settings.outbox_dir / "original")
        (success,) = _entries(test_settings.outbox_dir / "success")
        assert (original / "report.pdf").read_bytes() == sample_pdf_bytes
        assert "Hello PDF World" in (success / "report.txt").read_text(encoding="utf-8")
        attributes = json.loads((success / ATTRIBUTES_FILE).read_text(encoding="utf-8"))
        assert attributes["mime.type"] == "application/pdf"
        assert attributes["filename"] == "report.txt"
        assert list(test_settings.inbox_dir.glob("*.pdf")) == []

    def test_worker_routes_unconvertible_document_to_failure(self, test_settings: Settings) -> None:
        worker = _make_worker(test_settings)
        (test_settings.inbox_dir / "blob.bin").write_bytes(bytes(range(256)))

        worker.run(max_jobs=1)

        (failure,) = _entries(test_settings.outbox_dir / "failure")
        assert (failure / "blob.bin").read_bytes() == bytes(range(256))
        assert _entries(test_settings.outbox_dir / "success") == []

    def test_worker_processes_inbox_in_order(self, test_settings: Settings) -> None:
        worker = _make_worker(test_settings)
        (test_settings.inbox_dir / "a.txt").write_text("first note", encoding="utf-8")
        (test_settings.inbox_dir / "b.txt").write_text("second note", encoding="utf-8")

        worker.run(max_jobs=2)

        assert len(_entries(test_settings.outbox_dir / "success")) == 2
        assert len(_entries(test_settings.outbox_dir / "original")) == 2

    def test_worker_resumes_document_claimed_by_interrupted_run(self, test_settings: Settings) -> None:
        worker = _make_worker(test_settings)
        claimed = test_settings.inbox_dir / CLAIMED_DIR
        claimed.mkdir()
        (claimed / "left.txt").write_text("left behind", encoding="utf-8")

        assert worker.run(max_jobs=1) == 1

        (success,) = _entries(test_settings.outbox_dir / "success")
        assert "left behind" in (success / "left.txt").read_text(encoding="utf-8")
        assert list(claimed.iterdir()) == []
