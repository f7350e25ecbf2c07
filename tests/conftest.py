"""Shared pytest fixtures and configuration for pytest."""

import sys
from pathlib import Path

import pytest

from clipmulti.cli.main import main
from clipmulti.clipboard.mirror import EngineRunner
from clipmulti.clipboard.storage import StoreFile
from clipmulti.clipboard.store import LocalStore
from clipmulti.core.constants import ENV_DATA_DIR, ENV_ENGINE, ENV_ENGINE_DATA_DIR
from clipmulti.core.errors import EngineError, ExternalToolUnavailable


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for platform-specific tests."""
    config.addinivalue_line("markers", "windows: mark test to run only on Windows")
    config.addinivalue_line("markers", "unix_only: mark test to run only on Unix")
    config.addinivalue_line(
        "markers", "subprocess: mark test that launches the engine as a real process"
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Auto-skip tests based on platform markers."""
    skip_windows = pytest.mark.skip(reason="Windows-only test")
    skip_unix = pytest.mark.skip(reason="Unix-only test")

    for item in items:
        if "windows" in item.keywords and sys.platform != "win32":
            item.add_marker(skip_windows)
        if "unix_only" in item.keywords and sys.platform == "win32":
            item.add_marker(skip_unix)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer CLIPMULTI_* variables out of every test."""
    for name in (ENV_DATA_DIR, ENV_ENGINE, ENV_ENGINE_DATA_DIR):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "clipboard_history.json"


class FakeClock:
    """Deterministic, manually advanced time source."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(store_path: Path, clock: FakeClock) -> LocalStore:
    """Empty LocalStore over a temp file, with a fake clock."""
    return LocalStore(StoreFile(store_path), clock=clock)


class InProcessEngine(EngineRunner):
    """Engine runner that executes the real CLI in-process.

    Records every argument list so tests can inspect payload file paths.
    """

    def __init__(self, data_dir: Path) -> None:
        super().__init__(["clipmulti"], data_dir=str(data_dir))
        self.data_dir = data_dir
        self.calls: list[list[str]] = []

    def is_available(self) -> bool:
        return True

    def run(self, *args: str) -> str:
        self.calls.append(list(args))
        code = main(["--data-dir", str(self.data_dir), *args])
        if code != 0:
            raise EngineError(f"exit {code}", returncode=code)
        return ""


class UnavailableEngine(EngineRunner):
    """Engine runner whose executable never launches."""

    def __init__(self) -> None:
        super().__init__(["clipmulti-missing"])
        self.calls: list[list[str]] = []

    def is_available(self) -> bool:
        return False

    def run(self, *args: str) -> str:
        self.calls.append(list(args))
        raise ExternalToolUnavailable("Cannot launch engine 'clipmulti-missing'")


@pytest.fixture
def engine(tmp_path: Path) -> InProcessEngine:
    return InProcessEngine(tmp_path / "engine")


@pytest.fixture
def missing_engine() -> UnavailableEngine:
    return UnavailableEngine()


@pytest.fixture
def mirror_path(tmp_path: Path) -> Path:
    return tmp_path / "mirror" / "clipboard_history.json"
