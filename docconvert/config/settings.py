from pathlib import Path

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from docconvert.config.data_size import parse_data_size

PIPELINE_MODES = ("convert", "metadata")


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    pipeline_mode: str = "convert"
    max_file_size: str = "1MB"
    pdf_password: SecretStr | None = None
    pdf_engine: str = "pdfplumber"

    inbox_dir: Path = Path("/app/files/inbox")
    outbox_dir: Path = Path("/app/files/outbox")
    max_job_attempts: int = 3
    job_poll_interval_seconds: int = 5

    @field_validator("pipeline_mode")
    @classmethod
    def _check_pipeline_mode(cls, value: str) -> str:
        mode = value.lower()
        if mode not in PIPELINE_MODES:
            raise ValueError(f"pipeline_mode must be one of {list(PIPELINE_MODES)}")
        return mode

    @field_validator("max_file_size")
    @classmethod
    def _check_max_file_size(cls, value: str) -> str:
        parse_data_size(value)
        return value

    @field_validator("pdf_password")
    @classmethod
    def _check_pdf_password(cls, value: SecretStr | None) -> SecretStr | None:
        if value is not None and not value.get_secret_value():
            raise ValueError("pdf_password must not be empty when set")
        return value

    @property
    def max_file_size_bytes(self) -> int:
        return parse_data_size(self.max_file_size)
