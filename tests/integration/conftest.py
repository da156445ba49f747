from pathlib import Path

import pytest

from docconvert.config.settings import Settings


@pytest.fixture
def files_root(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def test_settings(files_root: Path) -> Settings:
    return Settings(
        inbox_dir=files_root / "inbox",
        outbox_dir=files_root / "outbox",
        max_file_size="1MB",
        max_job_attempts=2,
        job_poll_interval_seconds=0,
    )


@pytest.fixture(params=["pdfplumber", "pymupdf"])
def pdf_engine(request: pytest.FixtureRequest) -> str:
    return request.param
