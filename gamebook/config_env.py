"""Load ``.env`` files for the CLI and normalize the gamebook path variables."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

# variables holding filesystem paths; relative values are taken from the cwd
PATH_VARS = ("GAMEBOOK_HOME", "GAMEBOOK_CRT")


def _env_files(cwd: Path) -> list[Path]:
    files = [cwd / ".env.local"]
    if os.getenv("PYTEST_CURRENT_TEST"):
        files.append(cwd / ".env.test")
    return [f for f in files if f.exists()]


def _normalize_path_var(key: str) -> None:
    raw = os.getenv(key)
    if not raw:
        return
    path = Path(raw).expanduser()
    try:
        path = path.resolve()
    except OSError:
        pass
    os.environ[key] = str(path)


def load_env() -> None:
    """Load ``.env``, then ``.env.local`` (and ``.env.test`` under pytest).

    Values already in the process environment always win.
    """
    base = find_dotenv(".env", usecwd=True)
    if base:
        load_dotenv(base, override=False)
    for extra in _env_files(Path.cwd()):
        load_dotenv(extra, override=False)

    for key in PATH_VARS:
        _normalize_path_var(key)
