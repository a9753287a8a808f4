"""Terrain Profile - elevation profile between two points on a map."""

import subprocess
from functools import lru_cache
from pathlib import Path

__version_date__ = "2026-10-17"


@lru_cache(maxsize=1)
def version_label() -> str:
    """Release date plus the commit the package was loaded from, for page footers.

    Git runs in the package directory, not the working directory, so a server
    started elsewhere still reports its own checkout. Outside a checkout the
    commit is shown as 'unknown'.
    """
    commit = "unknown"
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            cwd=Path(__file__).resolve().parent,
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0 and result.stdout.strip():
            commit = result.stdout.strip()
    except (OSError, subprocess.SubprocessError):
        pass
    return f"{__version_date__} ({commit})"
