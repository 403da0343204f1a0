from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir as _uc

ENV_DIR = "PYDEFAULTS_DIR"
ENV_APP_NAME = "PYDEFAULTS_APP_NAME"

FORMATS = {"plist": ".plist", "yaml": ".yaml"}

# ---------------------------------------------------------------------------
# User directories
# ---------------------------------------------------------------------------

def _app_name(default: str) -> str:
    return os.getenv(ENV_APP_NAME, default)


def defaults_dir(app_name: str = "pydefaults") -> Path:
    """Return the directory holding defaults files.

    ``PYDEFAULTS_DIR`` replaces the platform user config directory.
    """
    env = os.getenv(ENV_DIR)
    if env:
        return Path(env).expanduser().resolve()
    return Path(_uc(appname=_app_name(app_name))).resolve()


def defaults_file(suite: str, fmt: str = "plist", *, app_name: str = "pydefaults") -> Path:
    """Return ``<defaults_dir>/<suite>.<fmt>``."""
    if fmt not in FORMATS:
        raise ValueError(f"unknown format: {fmt!r}")
    if not suite or suite in {".", ".."} or any(c in suite for c in "/\\"):
        raise ValueError(f"invalid suite name: {suite!r}")
    return defaults_dir(app_name) / f"{suite}{FORMATS[fmt]}"
