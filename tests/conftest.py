"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from warden.audit.logger import AuditLogger
from warden.scanner.engine import FileScanner


@pytest.fixture
def make_file(tmp_path: Path) -> Callable[[str, bytes | str], Path]:
    """Write a file under tmp_path and return its path."""

    def _make(name: str, content: bytes | str) -> Path:
        path = tmp_path / name
        if isinstance(content, str):
            content = content.encode("utf-8")
        path.write_bytes(content)
        return path

    return _make


@pytest.fixture
def scanner() -> FileScanner:
    return FileScanner()


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    return tmp_path / "security_logs"


@pytest.fixture
def audit_logger(log_dir: Path) -> AuditLogger:
    return AuditLogger(log_dir)


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's real config and data directories out of every test."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config-home"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data-home"))
    monkeypatch.delenv("WARDEN_LOG_DIR", raising=False)
    monkeypatch.delenv("WARDEN_MAX_FILE_SIZE", raising=False)
