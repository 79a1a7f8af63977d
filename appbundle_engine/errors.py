"""Error taxonomy for bundle builds and deployments."""

from pathlib import Path
from typing import Union


class BundleError(Exception):
    """Base class for every fatal build or deploy failure."""


class InputError(BundleError):
    """Malformed or missing descriptor input. Raised before any archive is produced."""


class CompileError(BundleError):
    """The compiler collaborator failed for a component."""

    def __init__(self, classname: str, diagnostics: str):
        self.classname = classname
        self.diagnostics = diagnostics
        super().__init__(f"Compilation failed for component {classname}:\n{diagnostics}".rstrip())


class BundleIOError(BundleError):
    """A create, copy, delete, pack or unpack step failed."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{reason}: {path}")
