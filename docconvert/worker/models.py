from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Job:
    """A claimed inbox file awaiting processing."""

    path: Path
    name: str
    attempts: int = 0
