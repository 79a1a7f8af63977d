"""Deployment installer - unpacks a bundle into the installation's application tree."""

from pathlib import Path
from typing import List, Optional, Set

from loguru import logger

from ..archive import entry_names, extract_entry, read_entry, unpack
from ..bundle.schema import (
    BUNDLE_EXTENSION,
    ArchivedApplicationDescriptor,
    BundleManifest,
    DeployedApplicationDescriptor,
    ManifestKey,
    component_entry,
    component_resources_entry,
    descriptor_entry,
)
from ..bundle.writer import read_manifest
from ..errors import BundleIOError, InputError
from ..fs import copy_file, ensure_directory, list_files, recreate_directory, remove_tree, scratch_directory
from ..models import InstallPaths


class DeploymentInstaller:
    """Deploys, undeploys and lists applications of one installation.

    Deploying always replaces: an existing application directory with the same
    name is deleted before anything from the new bundle is written.
    """

    def __init__(self, paths: InstallPaths):
        self.paths = paths

    def deploy(
        self,
        bundle_path: Path,
        platform_lib_dir: Optional[Path] = None,
        apps_root_dir: Optional[Path] = None,
    ) -> Path:
        """
        Deploy a bundle archive.

        Args:
            bundle_path: Path to the ``.hab`` bundle
            platform_lib_dir: Libraries provided by the installation (default: bin dir)
            apps_root_dir: Root of all deployed applications (default: apps dir)

        Returns:
            The deployed application directory
        """
        bundle_path = Path(bundle_path)
        platform_lib_dir = Path(platform_lib_dir or self.paths.bin_dir)
        apps_root_dir = Path(apps_root_dir or self.paths.apps_dir)

        if bundle_path.suffix != BUNDLE_EXTENSION:
            raise InputError(f"Invalid bundle file (expected {BUNDLE_EXTENSION}): {bundle_path}")
        if not bundle_path.is_file():
            raise InputError(f"Bundle file does not exist: {bundle_path}")

        manifest = read_manifest(bundle_path)
        descriptor = ArchivedApplicationDescriptor.from_json(read_entry(bundle_path, manifest.entry(ManifestKey.HAM_FILE)))
        if descriptor.application_name != manifest.application_name:
            logger.warning(
                f"Manifest names {manifest.application_name} but descriptor names {descriptor.application_name}; "
                f"using the descriptor"
            )
        self._check_entries(bundle_path, manifest, descriptor)

        app_dir = recreate_directory(apps_root_dir / descriptor.application_name).resolve()
        logger.info(f"Deploying {descriptor.application_name} into {app_dir}")

        with scratch_directory(self.paths.temp_dir / f"deploy-{descriptor.application_name}") as scratch:
            self._deploy_libraries(bundle_path, manifest, app_dir, platform_lib_dir, scratch)
            self._deploy_shared_resources(bundle_path, manifest, app_dir, scratch)
            deployed = self._deploy_descriptor(descriptor, app_dir)
            self._deploy_components(bundle_path, descriptor, app_dir, scratch)

        logger.info(f"Successfully deployed: {deployed.application_name}")
        return app_dir

    def _check_entries(self, bundle_path: Path, manifest: BundleManifest, descriptor: ArchivedApplicationDescriptor):
        names = set(entry_names(bundle_path))
        required = [manifest.entry(ManifestKey.LIBRARY_JAR)]
        required += [component_entry(c.classname) for c in descriptor.components]
        shared = manifest.entry(ManifestKey.SHARED_RESOURCES_JAR)
        if shared:
            required.append(shared)
        missing = [name for name in required if name not in names]
        if missing:
            raise InputError(f"Bundle {bundle_path} is missing entries: {', '.join(missing)}")

    def _deploy_libraries(
        self, bundle_path: Path, manifest: BundleManifest, app_dir: Path, platform_lib_dir: Path, scratch: Path
    ) -> List[Path]:
        lib_dir = ensure_directory(app_dir / "lib")
        lib_jar = extract_entry(bundle_path, manifest.entry(ManifestKey.LIBRARY_JAR), scratch)
        extracted = unpack(lib_jar, scratch / "lib")

        provided = platform_library_names(platform_lib_dir)
        deployed = []
        for library in extracted:
            if library.name in provided:
                logger.debug(f"Skipping {library.name}: provided by the platform")
                continue
            deployed.append(copy_file(library, lib_dir / library.name))

        remove_tree(lib_jar)
        logger.info(f"Deployed {len(deployed)} libraries ({len(extracted) - len(deployed)} provided by the platform)")
        return deployed

    def _deploy_shared_resources(self, bundle_path: Path, manifest: BundleManifest, app_dir: Path, scratch: Path):
        entry = manifest.entry(ManifestKey.SHARED_RESOURCES_JAR)
        if not entry:
            return
        resources_jar = extract_entry(bundle_path, entry, scratch)
        unpack(resources_jar, app_dir / "resources")
        remove_tree(resources_jar)

    def _deploy_descriptor(self, descriptor: ArchivedApplicationDescriptor, app_dir: Path) -> DeployedApplicationDescriptor:
        deployed = descriptor.resolve(app_dir)
        target = app_dir / descriptor_entry(deployed.application_name)
        try:
            target.write_text(deployed.to_json(), encoding="utf-8")
        except OSError as e:
            raise BundleIOError(target, f"Cannot write application descriptor ({e.strerror})") from e
        return deployed

    def _deploy_components(
        self, bundle_path: Path, descriptor: ArchivedApplicationDescriptor, app_dir: Path, scratch: Path
    ) -> None:
        for component in descriptor.components:
            classname = component.classname
            component_dir = app_dir / classname
            component_jar = extract_entry(bundle_path, component_entry(classname), scratch / "components")
            unpack(component_jar, component_dir)

            resources_jar = component_dir / component_resources_entry(classname)
            if resources_jar.exists():
                unpack(resources_jar, component_dir / "resources")
                remove_tree(resources_jar)

            remove_tree(component_jar)
            logger.debug(f"Deployed component {classname}")

    def undeploy(self, application_name: str, apps_root_dir: Optional[Path] = None) -> bool:
        """Remove a deployed application. Returns False if no such application exists."""
        apps_root_dir = Path(apps_root_dir or self.paths.apps_dir)
        app_dir = apps_root_dir / application_name
        if app_dir.resolve().parent != apps_root_dir.resolve():
            raise InputError(f"Invalid application name: {application_name}")
        removed = remove_tree(app_dir)
        if removed:
            logger.info(f"Undeployed {application_name}")
        return removed

    def list_applications(self, apps_root_dir: Optional[Path] = None) -> List[DeployedApplicationDescriptor]:
        """Deployed applications, found by their descriptor files."""
        apps_root_dir = Path(apps_root_dir or self.paths.apps_dir)
        if not apps_root_dir.is_dir():
            return []
        applications = []
        for app_dir in sorted(p for p in apps_root_dir.iterdir() if p.is_dir()):
            descriptor_file = app_dir / descriptor_entry(app_dir.name)
            if not descriptor_file.is_file():
                logger.warning(f"Skipping {app_dir}: no application descriptor")
                continue
            applications.append(DeployedApplicationDescriptor.from_file(descriptor_file))
        return applications


def platform_library_names(platform_lib_dir: Path) -> Set[str]:
    """File names of every library the platform provides."""
    return {path.name for path in list_files(platform_lib_dir)}
