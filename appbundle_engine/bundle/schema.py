"""Bundle schema - contract between the bundle assembler and the deployment installer."""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from ..errors import InputError
from ..models import CLASSNAME_PATTERN, DESCRIPTOR_EXTENSION, reserved_classnames

BUNDLE_VERSION = "1.0.0"
BUNDLE_EXTENSION = ".hab"
MANIFEST_ENTRY = "manifest.json"
LIBRARY_ENTRY = "lib.jar"
SHARED_RESOURCES_ENTRY = "shared-resources.jar"
RESOURCES_SUFFIX = "-resources.jar"
ARCHIVE_SUFFIX = ".jar"

# Stands in for the application directory until deploy time.
APP_DIR_PLACEHOLDER = "@APP_DIR@"


def component_entry(classname: str) -> str:
    return f"{classname}{ARCHIVE_SUFFIX}"


def component_resources_entry(classname: str) -> str:
    return f"{classname}{RESOURCES_SUFFIX}"


def descriptor_entry(application_name: str) -> str:
    return f"{application_name}{DESCRIPTOR_EXTENSION}"


class ManifestKey(str, Enum):
    """Roles recorded in the bundle manifest"""

    HAM_FILE = "ham_file"
    LIBRARY_JAR = "lib_jar"
    SHARED_RESOURCES_JAR = "shared_resources_jar"


class BundleManifest(BaseModel):
    """Bundle manifest metadata."""

    bundle_version: str = Field(default=BUNDLE_VERSION)
    tool_version: str
    application_name: str
    created_at: str
    entries: Dict[ManifestKey, str]

    @model_validator(mode="after")
    def _required_entries(self) -> "BundleManifest":
        for key in (ManifestKey.HAM_FILE, ManifestKey.LIBRARY_JAR):
            if not self.entries.get(key):
                raise ValueError(f"manifest is missing the {key.value} entry")
        return self

    def entry(self, key: ManifestKey) -> Optional[str]:
        return self.entries.get(key)

    @classmethod
    def from_json(cls, data: bytes) -> "BundleManifest":
        try:
            return cls.model_validate_json(data)
        except ValidationError as e:
            raise InputError(f"Invalid bundle manifest:\n{e}") from e


# ============================================================================
# Application Descriptor (two phases)
# ============================================================================


class ComponentEntry(BaseModel):
    """Deploy-time view of one component."""

    classname: str
    directory: str
    config_file: Optional[str] = None
    resources_dir: Optional[str] = None

    @field_validator("classname")
    @classmethod
    def _safe_name(cls, value: str) -> str:
        return _check_name(value)


def _check_name(value: str) -> str:
    if not CLASSNAME_PATTERN.match(value):
        raise ValueError(f"unsafe name in application descriptor: {value!r}")
    return value


def _substitute(value: Any, replacement: str) -> Any:
    if isinstance(value, str):
        return value.replace(APP_DIR_PLACEHOLDER, replacement)
    if isinstance(value, list):
        return [_substitute(item, replacement) for item in value]
    if isinstance(value, dict):
        return {key: _substitute(item, replacement) for key, item in value.items()}
    return value


def _contains_placeholder(value: Any) -> bool:
    if isinstance(value, str):
        return APP_DIR_PLACEHOLDER in value
    if isinstance(value, list):
        return any(_contains_placeholder(item) for item in value)
    if isinstance(value, dict):
        return any(_contains_placeholder(item) for item in value.values())
    return False


class ArchivedApplicationDescriptor(BaseModel):
    """Location-agnostic descriptor as stored inside a bundle.

    Every location is expressed relative to ``APP_DIR_PLACEHOLDER``; only
    :meth:`resolve` produces a descriptor with concrete paths.
    """

    application_name: str = Field(..., min_length=1)
    lib_dir: str = f"{APP_DIR_PLACEHOLDER}/lib"
    resources_dir: Optional[str] = None
    components: List[ComponentEntry] = Field(..., min_length=1)

    @field_validator("application_name")
    @classmethod
    def _safe_name(cls, value: str) -> str:
        return _check_name(value)

    @model_validator(mode="after")
    def _no_reserved_classnames(self) -> "ArchivedApplicationDescriptor":
        reserved = reserved_classnames(self.application_name)
        for component in self.components:
            if component.classname.lower() in reserved:
                raise ValueError(f"component classname {component.classname!r} is reserved")
        return self

    @classmethod
    def create(
        cls,
        application_name: str,
        components: List[ComponentEntry],
        shared_resources: bool = False,
    ) -> "ArchivedApplicationDescriptor":
        return cls(
            application_name=application_name,
            resources_dir=f"{APP_DIR_PLACEHOLDER}/resources" if shared_resources else None,
            components=components,
        )

    @staticmethod
    def component(classname: str, config_name: Optional[str] = None, resources: bool = False) -> ComponentEntry:
        directory = f"{APP_DIR_PLACEHOLDER}/{classname}"
        return ComponentEntry(
            classname=classname,
            directory=directory,
            config_file=f"{directory}/{config_name}" if config_name else None,
            resources_dir=f"{directory}/resources" if resources else None,
        )

    def to_json(self) -> str:
        return self.model_dump_json(indent=2)

    @classmethod
    def from_json(cls, data: bytes) -> "ArchivedApplicationDescriptor":
        try:
            return cls.model_validate_json(data)
        except ValidationError as e:
            raise InputError(f"Invalid application descriptor:\n{e}") from e

    def resolve(self, app_dir: Path) -> "DeployedApplicationDescriptor":
        """Replace every placeholder occurrence with the absolute application directory."""
        app_dir = Path(app_dir).resolve()
        data = _substitute(self.model_dump(mode="json"), str(app_dir))
        return DeployedApplicationDescriptor(app_dir=app_dir, **data)


class DeployedApplicationDescriptor(BaseModel):
    """Descriptor written into a deployed application directory."""

    application_name: str
    app_dir: Path
    lib_dir: str
    resources_dir: Optional[str] = None
    components: List[ComponentEntry]

    @model_validator(mode="after")
    def _fully_resolved(self) -> "DeployedApplicationDescriptor":
        if _contains_placeholder(self.model_dump(mode="json")):
            raise ValueError("deployed descriptor still contains the application directory placeholder")
        return self

    @property
    def classnames(self) -> List[str]:
        return [component.classname for component in self.components]

    def to_json(self) -> str:
        return self.model_dump_json(indent=2)

    @classmethod
    def from_file(cls, path: Path) -> "DeployedApplicationDescriptor":
        try:
            return cls.model_validate_json(Path(path).read_bytes())
        except OSError as e:
            raise InputError(f"Cannot read application descriptor {path}: {e}") from e
        except ValidationError as e:
            raise InputError(f"Invalid application descriptor {path}:\n{e}") from e
