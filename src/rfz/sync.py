"""Mirror synchronisation through an external ``rsync``."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from rfz.config import DEFAULT_REMOTE
from rfz.errors import SyncError

LOGGER = logging.getLogger(__name__)

INCLUDE_PATTERNS = ("*.html",)


def build_rsync_command(
    target: Path,
    *,
    command: str = "rsync",
    remote: str = DEFAULT_REMOTE,
    verbosity: int = 0,
) -> list[str]:
    argv = [command]
    if verbosity > 0:
        argv.append("-" + "v" * verbosity)
    argv.extend(["--archive", "--compress"])
    argv.extend(f"--include={pattern}" for pattern in INCLUDE_PATTERNS)
    argv.extend(["--exclude=**", "--prune-empty-dirs", remote, str(target)])
    return argv


def sync_mirror(
    target: Path,
    *,
    command: str = "rsync",
    remote: str = DEFAULT_REMOTE,
    verbosity: int = 0,
) -> None:
    """Bring ``target`` up to date with ``remote``, creating it if needed."""
    target.mkdir(parents=True, exist_ok=True)
    argv = build_rsync_command(target, command=command, remote=remote, verbosity=verbosity)
    LOGGER.info("Running: %s", " ".join(argv))
    try:
        completed = subprocess.run(argv, check=False)
    except OSError as exc:
        raise SyncError(f"Failed to run '{command}': {exc}") from exc
    if completed.returncode != 0:
        raise SyncError(f"'{command}' exited with status {completed.returncode}")
