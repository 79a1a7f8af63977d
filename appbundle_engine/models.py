"""
Core models for the bundle engine.

Build inputs (bundle descriptor and its scopes), resolved library files, and the
installation layout that every build/deploy operation receives explicitly.
"""

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator, model_validator

from .errors import InputError

# Component classnames double as archive entry names and directory names.
CLASSNAME_PATTERN = re.compile(r"^[A-Za-z0-9_$][A-Za-z0-9_.$-]*$")

# Names taken by fixed entries of the bundle or the deployed application layout.
RESERVED_CLASSNAMES = frozenset({"lib", "resources", "shared-resources"})

DESCRIPTOR_EXTENSION = ".ham"


def reserved_classnames(application_name: str) -> FrozenSet[str]:
    """Lower-cased names no component of ``application_name`` may take."""
    return RESERVED_CLASSNAMES | {f"{application_name}{DESCRIPTOR_EXTENSION}".lower()}


def _anchor_path(value: Optional[Path], info: ValidationInfo) -> Optional[Path]:
    """Resolve a relative path against the descriptor's directory, when one is known."""
    if value is None or value.is_absolute():
        return value
    base_dir = (info.context or {}).get("base_dir")
    if base_dir is None:
        return value
    return Path(base_dir) / value


# ============================================================================
# Dependency Models
# ============================================================================


class DependencyRef(BaseModel):
    """Reference to one or more library files.

    A plain string in the descriptor is shorthand for ``{"path": "<string>"}``.
    """

    path: Path = Field(..., description="Library file or directory of library files")
    pattern: str = Field(default="*", description="Glob applied when path is a directory")

    @model_validator(mode="before")
    @classmethod
    def _expand_shorthand(cls, data: Any) -> Any:
        if isinstance(data, (str, Path)):
            return {"path": data}
        return data

    @field_validator("path")
    @classmethod
    def _anchor(cls, value: Path, info: ValidationInfo) -> Path:
        return _anchor_path(value, info)


@dataclass(frozen=True)
class LibraryFile:
    """A concrete library file. ``name`` is the deduplication key."""

    name: str
    path: Path

    @classmethod
    def from_path(cls, path: Path) -> "LibraryFile":
        return cls(name=path.name, path=path)


# ============================================================================
# Bundle Descriptor Models
# ============================================================================


class SharedScope(BaseModel):
    """Dependencies, resources and config values common to every component."""

    dependencies: List[DependencyRef] = Field(default_factory=list)
    resources_dir: Optional[Path] = None
    config: Dict[str, str] = Field(default_factory=dict, description="Values for config template substitution")

    @field_validator("resources_dir")
    @classmethod
    def _anchor(cls, value: Optional[Path], info: ValidationInfo) -> Optional[Path]:
        return _anchor_path(value, info)


class ComponentDescriptor(BaseModel):
    """One independently compiled unit of an application."""

    classname: str
    source_dir: Path
    config_template: Optional[Path] = None
    resources_dir: Optional[Path] = None
    dependencies: List[DependencyRef] = Field(default_factory=list)

    @field_validator("classname")
    @classmethod
    def _check_classname(cls, value: str) -> str:
        if not CLASSNAME_PATTERN.match(value):
            raise ValueError(f"invalid component classname: {value!r}")
        if value in RESERVED_CLASSNAMES:
            raise ValueError(f"component classname {value!r} is reserved")
        return value

    @field_validator("source_dir", "config_template", "resources_dir")
    @classmethod
    def _anchor(cls, value: Optional[Path], info: ValidationInfo) -> Optional[Path]:
        return _anchor_path(value, info)


class BundleDescriptor(BaseModel):
    """Build input describing one application and its components."""

    application_name: str = Field(..., min_length=1)
    shared_scope: Optional[SharedScope] = None
    components: List[ComponentDescriptor] = Field(..., min_length=1)

    @field_validator("application_name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not CLASSNAME_PATTERN.match(value):
            raise ValueError(f"invalid application name: {value!r}")
        return value

    @model_validator(mode="after")
    def _unique_classnames(self) -> "BundleDescriptor":
        seen = set()
        reserved = reserved_classnames(self.application_name)
        for component in self.components:
            if component.classname in seen:
                raise ValueError(f"duplicate component classname: {component.classname}")
            if component.classname.lower() in reserved:
                raise ValueError(f"component classname {component.classname!r} is reserved")
            seen.add(component.classname)
        return self

    @property
    def shared(self) -> SharedScope:
        return self.shared_scope or SharedScope()


def load_bundle_descriptor(path: Path) -> BundleDescriptor:
    """Parse a JSON bundle descriptor. Relative paths are anchored at the file's directory."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InputError(f"Cannot read bundle descriptor {path}: {e}") from e

    try:
        return BundleDescriptor.model_validate_json(text, context={"base_dir": path.resolve().parent})
    except ValidationError as e:
        raise InputError(f"Invalid bundle descriptor {path}:\n{e}") from e


# ============================================================================
# Installation Layout
# ============================================================================


class InstallPaths(BaseModel):
    """Fixed directory layout of a runtime installation, rooted at ``home_dir``."""

    home_dir: Path

    @property
    def bin_dir(self) -> Path:
        """Platform-provided libraries and launch scripts."""
        return self.home_dir / "bin"

    @property
    def apps_dir(self) -> Path:
        return self.home_dir / "apps"

    @property
    def config_dir(self) -> Path:
        return self.home_dir / "config"

    @property
    def config_file(self) -> Path:
        return self.config_dir / "runtime.json"

    @property
    def temp_dir(self) -> Path:
        return self.home_dir / "temp"

    @property
    def log_dir(self) -> Path:
        return self.home_dir / "log"

    def app_dir(self, application_name: str) -> Path:
        return self.apps_dir / application_name


class RuntimeConfig(BaseModel):
    """Runtime settings consumed by the launch scripts."""

    memory_min: str = "128m"
    memory_max: str = "512m"
    file_encoding: str = "UTF-8"
    launcher: Optional[str] = None

    @classmethod
    def load(cls, paths: InstallPaths) -> "RuntimeConfig":
        """Read ``config/runtime.json``; defaults apply when the file is absent."""
        config_file = paths.config_file
        if not config_file.exists():
            return cls()
        try:
            return cls.model_validate(json.loads(config_file.read_text(encoding="utf-8")))
        except (OSError, ValueError) as e:
            raise InputError(f"Invalid runtime configuration {config_file}: {e}") from e
