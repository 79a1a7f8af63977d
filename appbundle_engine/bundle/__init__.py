from .schema import (
    APP_DIR_PLACEHOLDER,
    ArchivedApplicationDescriptor,
    BundleManifest,
    DeployedApplicationDescriptor,
    ManifestKey,
)
from .component import ComponentBuild, ComponentBuilder
from .writer import BundleAssembler, read_manifest

__all__ = [
    "APP_DIR_PLACEHOLDER",
    "ArchivedApplicationDescriptor",
    "BundleManifest",
    "DeployedApplicationDescriptor",
    "ManifestKey",
    "ComponentBuild",
    "ComponentBuilder",
    "BundleAssembler",
    "read_manifest",
]
