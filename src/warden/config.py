"""Global configuration — XDG paths, env vars, optional YAML overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from warden.scanner.engine import CONTENT_READ_LIMIT, MAX_FILE_SIZE
from warden.scanner.patterns import ALLOWED_EXTENSIONS

CONFIG_FILENAME = "config.yaml"


def _default_data_dir() -> Path:
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / "warden"
    return Path.home() / ".local" / "share" / "warden"


def _default_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "warden"
    return Path.home() / ".config" / "warden"


@dataclass
class WardenConfig:
    """Application-wide configuration."""

    data_dir: Path = field(default_factory=_default_data_dir)
    config_dir: Path = field(default_factory=_default_config_dir)
    log_dir: Path | None = None
    max_file_size: int = MAX_FILE_SIZE
    content_read_limit: int = CONTENT_READ_LIMIT
    allowed_extensions: tuple[str, ...] = tuple(sorted(ALLOWED_EXTENSIONS))
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.log_dir is None:
            self.log_dir = self.data_dir / "security_logs"

    @classmethod
    def load(cls, config_file: str | Path | None = None) -> WardenConfig:
        """Load config: defaults, then the YAML file, then environment variables."""
        config = cls()

        path = Path(config_file) if config_file else config.config_dir / CONFIG_FILENAME
        if path.is_file():
            config.apply(_read_yaml(path))

        env_log_dir = os.environ.get("WARDEN_LOG_DIR")
        if env_log_dir:
            config.log_dir = Path(env_log_dir)

        env_max_size = os.environ.get("WARDEN_MAX_FILE_SIZE")
        if env_max_size:
            config.max_file_size = int(env_max_size)

        return config

    def apply(self, data: dict) -> None:
        """Overlay values from a parsed YAML mapping."""
        if "log_dir" in data:
            self.log_dir = Path(data["log_dir"]).expanduser()
        if "max_file_size" in data:
            self.max_file_size = int(data["max_file_size"])
        if "content_read_limit" in data:
            self.content_read_limit = int(data["content_read_limit"])
        if "allowed_extensions" in data:
            exts = data["allowed_extensions"]
            if not isinstance(exts, list):
                raise ValueError("allowed_extensions must be a list")
            self.allowed_extensions = tuple(str(e).lower().lstrip(".") for e in exts)


def _read_yaml(path: Path) -> dict:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config YAML must be a mapping: {path}")
    return data
