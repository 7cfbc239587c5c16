"""Pytest configuration for keepwarm tests."""

import os
import sys
from pathlib import Path

import pytest
import structlog
from structlog._config import BoundLoggerLazyProxy

# Add src directory to sys.path for test imports
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

IDLE_TIMEOUT_ENV = "SECONDS_OF_DW_INACTIVITY_BEFORE_IDLING"


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate each test from the caller's environment.

    This fixture:
    - Removes KEEPWARM_* and idle-timeout variables from the environment
    - Runs the test from a temporary directory so no .env file is picked up
    - Resets the global settings instance before each test
    """
    for name in list(os.environ):
        if name.startswith("KEEPWARM_") or name == IDLE_TIMEOUT_ENV:
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)

    from keepwarm.config import reset_settings

    reset_settings()
    return tmp_path


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Reset structlog after each test to prevent closed file handle errors.

    CliRunner captures stderr with a temporary file. When configure_logging()
    runs inside CliRunner, structlog binds loggers to that temp file. After
    the test, CliRunner closes the file, so stale references are dropped here.
    """
    yield
    structlog.reset_defaults()
    for module in list(sys.modules.values()):
        for attr in getattr(module, "__dict__", {}).values():
            if isinstance(attr, BoundLoggerLazyProxy):
                attr.__dict__.pop("bind", None)
