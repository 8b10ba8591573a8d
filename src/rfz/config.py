"""Application configuration defaults."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from rfz.index.collection import DuplicatePolicy
from rfz.ingestion.parsers import DEFAULT_MAX_BYTES

APP_NAME = "rfz"
DEFAULT_REMOTE = "rsync.tools.ietf.org::tools.html"


def _get_default_data_dir() -> Path:
    """Get the default mirror location for the current platform."""
    if sys.platform == "win32":
        appdata = os.environ.get("LOCALAPPDATA", os.path.expanduser("~"))
        return Path(appdata) / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME

    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".local" / "share" / APP_NAME


def _default_jobs() -> int:
    return os.cpu_count() or 1


@dataclass(slots=True)
class AppConfig:
    data_dir: Path | None = None
    jobs: int = 0
    header_bytes: int = DEFAULT_MAX_BYTES
    max_depth: int = 3
    delimiter: str = "\t"
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.FIRST_WINS
    rsync_remote: str = DEFAULT_REMOTE
    rsync_command: str = "rsync"

    def __post_init__(self) -> None:
        if self.data_dir is None:
            self.data_dir = _get_default_data_dir()
        if self.jobs <= 0:
            self.jobs = _default_jobs()

    def resolve_data_dir(self, base_dir: Path | None = None) -> Path:
        if self.data_dir is None:
            self.data_dir = _get_default_data_dir()
        path = Path(self.data_dir).expanduser()
        if path.is_absolute() or base_dir is None:
            return path
        return base_dir / path
