"""Pytest configuration.

Ensures the `qbo_api` package under `src/` imports the same way during test
collection whether or not it has been installed.
"""

import sys
from pathlib import Path


def _prepend_sys_path(path: Path) -> None:
    resolved = str(path.resolve())
    if resolved not in sys.path:
        sys.path.insert(0, resolved)


REPO_ROOT = Path(__file__).resolve().parent

_prepend_sys_path(REPO_ROOT / "src")
