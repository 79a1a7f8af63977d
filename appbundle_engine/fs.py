"""Filesystem helpers shared by the build and deploy pipelines."""

import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Union

from loguru import logger

from .errors import BundleIOError


def ensure_directory(path: Union[str, Path]) -> Path:
    """Create a directory and return its Path object."""
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise BundleIOError(path, f"Cannot create directory ({e.strerror})") from e
    return path


def remove_tree(path: Union[str, Path]) -> bool:
    """Delete a file or directory tree. Returns False if nothing was there."""
    path = Path(path)
    if not path.exists() and not path.is_symlink():
        return False
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as e:
        raise BundleIOError(path, f"Cannot delete ({e.strerror})") from e
    return True


def recreate_directory(path: Union[str, Path]) -> Path:
    """Delete ``path`` recursively if present, then create it empty."""
    path = Path(path)
    if remove_tree(path):
        logger.debug(f"Removed existing directory {path}")
    return ensure_directory(path)


@contextmanager
def scratch_directory(path: Union[str, Path]) -> Iterator[Path]:
    """Yield an empty directory at ``path`` that is deleted on every exit path."""
    path = recreate_directory(path)
    try:
        yield path
    finally:
        remove_tree(path)


def list_files(root: Union[str, Path], pattern: str = "*") -> List[Path]:
    """All files under ``root`` matching ``pattern``, recursively, sorted by relative path."""
    root = Path(root)
    if not root.is_dir():
        return []
    return sorted((p for p in root.rglob(pattern) if p.is_file()), key=lambda p: p.relative_to(root).as_posix())


def copy_file(source: Path, target: Path) -> Path:
    """Copy a single file, creating the target's parent directory."""
    ensure_directory(target.parent)
    try:
        shutil.copy2(source, target)
    except OSError as e:
        raise BundleIOError(source, f"Cannot copy to {target} ({e.strerror})") from e
    return target
