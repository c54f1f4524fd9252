"""Shared pytest fixtures for ifacelens tests."""

from collections.abc import Callable
from pathlib import Path

import pytest
from dotenv import load_dotenv
from hypothesis import settings

from ifacelens.core.config import IfaceLensConfig

# Load environment variables from .env file
load_dotenv()

# Configure hypothesis for property-based testing
settings.register_profile("ci", max_examples=100, deadline=None)
settings.register_profile("dev", max_examples=20, deadline=None)
settings.load_profile("dev")


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Provide a fake clock starting at a fixed reading."""
    return FakeClock()


@pytest.fixture
def config() -> IfaceLensConfig:
    """Default configuration, isolated from any .env file."""
    return IfaceLensConfig(_env_file=None)


@pytest.fixture
def go_package(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing Go files into a fresh package directory.

    Usage: ``pkg = go_package({"a.go": "...", "b.go": "..."})``.
    """

    def _make(files: dict[str, str], name: str = "pkg") -> Path:
        directory = tmp_path / name
        directory.mkdir(parents=True, exist_ok=True)
        for filename, source in files.items():
            (directory / filename).write_text(source, encoding="utf-8")
        return directory

    return _make
