"""Dependency resolution and library deduplication across scopes."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

from loguru import logger

from .errors import InputError
from .fs import copy_file, ensure_directory, list_files
from .models import DependencyRef, LibraryFile


class DependencyResolver(ABC):
    """
    Interface for turning dependency references into concrete library files.
    Implementations must be deterministic: resolving the same reference twice
    yields the same files in the same order.
    """

    @abstractmethod
    def resolve(self, ref: DependencyRef, scratch_dir: Path) -> List[LibraryFile]:
        """
        Resolve one reference.

        Args:
            ref: The dependency reference from the bundle descriptor
            scratch_dir: Directory the resolver may write resolved files into

        Returns:
            Ordered list of library files, possibly empty
        """
        pass

    def resolve_all(self, refs: Iterable[DependencyRef], scratch_dir: Path) -> List[LibraryFile]:
        """Resolve a scope's references in order."""
        libraries: List[LibraryFile] = []
        for index, ref in enumerate(refs):
            libraries.extend(self.resolve(ref, scratch_dir / str(index)))
        return libraries


class LocalDependencyResolver(DependencyResolver):
    """Resolves references to files or directories on the local filesystem.

    Resolved files are copied into the scratch directory so later build steps
    read a stable snapshot.
    """

    def resolve(self, ref: DependencyRef, scratch_dir: Path) -> List[LibraryFile]:
        source = ref.path
        if source.is_file():
            candidates = [source]
        elif source.is_dir():
            candidates = list_files(source, ref.pattern)
        else:
            raise InputError(f"Dependency path does not exist: {source}")

        ensure_directory(scratch_dir)
        libraries = []
        for candidate in candidates:
            # Nested library directories are flattened; name collisions inside one
            # reference follow the same first-wins rule as scope merging.
            target = scratch_dir / candidate.name
            if target.exists():
                logger.debug(f"Skipping {candidate}: {candidate.name} already resolved from {source}")
                continue
            libraries.append(LibraryFile.from_path(copy_file(candidate, target)))

        logger.debug(f"Resolved {len(libraries)} libraries from {source}")
        return libraries


def merge_libraries(scopes: Sequence[Sequence[LibraryFile]]) -> List[LibraryFile]:
    """Merge ordered per-scope library lists into one list with unique names.

    Scopes are processed in the given order and entries within a scope in
    order; the first library seen with a given name is kept and later ones
    are dropped. Contents are never compared.
    """
    kept: Dict[str, LibraryFile] = {}
    for scope in scopes:
        for library in scope:
            if library.name in kept:
                logger.debug(f"Dropping duplicate library {library.name} ({library.path})")
                continue
            kept[library.name] = library
    return list(kept.values())
