"""Zip archive codec used for every archive the pipeline produces or consumes."""

import zipfile
from pathlib import Path
from typing import Iterable, List, Optional

from .errors import BundleIOError
from .fs import ensure_directory, list_files


def pack_directory(source_dir: Path, target: Path) -> Path:
    """Pack every file under ``source_dir`` into ``target``, keeping relative paths."""
    ensure_directory(target.parent)
    try:
        with zipfile.ZipFile(target, "w", zipfile.ZIP_DEFLATED) as zipf:
            for path in list_files(source_dir):
                zipf.write(path, path.relative_to(source_dir).as_posix())
    except OSError as e:
        raise BundleIOError(target, f"Cannot pack {source_dir} ({e})") from e
    return target


def pack_files(files: Iterable[Path], target: Path, arcnames: Optional[Iterable[str]] = None) -> Path:
    """Pack ``files`` flat into ``target``. Entry names default to the file names."""
    files = list(files)
    names = list(arcnames) if arcnames is not None else [f.name for f in files]
    ensure_directory(target.parent)
    try:
        with zipfile.ZipFile(target, "w", zipfile.ZIP_DEFLATED) as zipf:
            for path, name in zip(files, names):
                zipf.write(path, name)
    except OSError as e:
        raise BundleIOError(target, f"Cannot pack archive ({e})") from e
    return target


def unpack(archive: Path, target_dir: Path) -> List[Path]:
    """Extract ``archive`` into ``target_dir`` and return the extracted files."""
    target_dir = ensure_directory(target_dir)
    root = target_dir.resolve()
    extracted: List[Path] = []
    try:
        with zipfile.ZipFile(archive) as zipf:
            for info in zipf.infolist():
                destination = (target_dir / info.filename).resolve()
                if root != destination and root not in destination.parents:
                    raise BundleIOError(archive, f"Entry {info.filename} escapes the extraction directory")
                zipf.extract(info, target_dir)
                if not info.is_dir():
                    extracted.append(target_dir / info.filename)
    except zipfile.BadZipFile as e:
        raise BundleIOError(archive, f"Not a valid archive ({e})") from e
    except OSError as e:
        raise BundleIOError(archive, f"Cannot unpack into {target_dir} ({e})") from e
    return extracted


def entry_names(archive: Path) -> List[str]:
    try:
        with zipfile.ZipFile(archive) as zipf:
            return zipf.namelist()
    except zipfile.BadZipFile as e:
        raise BundleIOError(archive, f"Not a valid archive ({e})") from e
    except OSError as e:
        raise BundleIOError(archive, f"Cannot read archive ({e})") from e


def read_entry(archive: Path, name: str) -> bytes:
    """Read one entry; a missing entry is reported as a BundleIOError."""
    try:
        with zipfile.ZipFile(archive) as zipf:
            return zipf.read(name)
    except KeyError as e:
        raise BundleIOError(archive, f"Missing archive entry {name}") from e
    except zipfile.BadZipFile as e:
        raise BundleIOError(archive, f"Not a valid archive ({e})") from e
    except OSError as e:
        raise BundleIOError(archive, f"Cannot read archive ({e})") from e


def extract_entry(archive: Path, name: str, target_dir: Path) -> Path:
    """Write a single archive entry into ``target_dir`` under its own name."""
    data = read_entry(archive, name)
    target = ensure_directory(target_dir) / Path(name).name
    try:
        target.write_bytes(data)
    except OSError as e:
        raise BundleIOError(target, f"Cannot write archive entry ({e.strerror})") from e
    return target
