"""CLI configuration."""

import os
from pathlib import Path
from typing import Optional

from appbundle_engine.models import InstallPaths

HOME_ENV_VAR = "APPBUNDLE_HOME"
DEFAULT_HOME = Path.home() / ".appbundle"


def get_home_dir() -> Path:
    """Installation home: ``APPBUNDLE_HOME`` if set, else ``~/.appbundle``."""
    value = os.environ.get(HOME_ENV_VAR)
    return Path(value).expanduser() if value else DEFAULT_HOME


def get_install_paths(home: Optional[Path] = None) -> InstallPaths:
    return InstallPaths(home_dir=(home or get_home_dir()).resolve())
