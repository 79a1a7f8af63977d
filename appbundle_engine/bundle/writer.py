import os
import tempfile
import zipfile
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from loguru import logger

from ..archive import pack_directory, pack_files, read_entry
from ..compiler import Compiler
from ..dependencies import DependencyResolver, LocalDependencyResolver, merge_libraries
from ..errors import BundleIOError, InputError
from ..fs import ensure_directory, remove_tree, scratch_directory
from ..models import BundleDescriptor
from ..templating import render_template
from ..version import __version__
from .component import ComponentBuild, ComponentBuilder, TemplateRenderer
from .schema import (
    BUNDLE_EXTENSION,
    LIBRARY_ENTRY,
    MANIFEST_ENTRY,
    SHARED_RESOURCES_ENTRY,
    ArchivedApplicationDescriptor,
    BundleManifest,
    ManifestKey,
    descriptor_entry,
)


def bundle_filename(application_name: str) -> str:
    return f"{application_name}{BUNDLE_EXTENSION}"


class BundleAssembler:
    """Builds a complete application bundle from a bundle descriptor.

    All intermediate output lives in a scratch directory. The bundle only
    appears at its target path once every step has succeeded; a failed build
    leaves no bundle there, not even one from an earlier build.
    """

    def __init__(
        self,
        compiler: Compiler,
        resolver: Optional[DependencyResolver] = None,
        renderer: TemplateRenderer = render_template,
        scratch_root: Optional[Path] = None,
    ):
        self.resolver = resolver or LocalDependencyResolver()
        self.builder = ComponentBuilder(compiler, self.resolver, renderer)
        self.scratch_root = scratch_root

    def assemble(self, descriptor: BundleDescriptor, output_dir: Path) -> Path:
        """Build ``<application_name>.hab`` in ``output_dir`` and return its path."""
        output_dir = ensure_directory(output_dir)
        target = output_dir / bundle_filename(descriptor.application_name)
        partial = output_dir / f".{target.name}.partial"

        scratch_root = self.scratch_root or Path(tempfile.mkdtemp(prefix="appbundle-"))
        published = False
        try:
            with scratch_directory(scratch_root / descriptor.application_name) as scratch:
                self._write_bundle(descriptor, scratch, partial)
            os.replace(partial, target)
            published = True
        except OSError as e:
            raise BundleIOError(target, f"Cannot write bundle ({e})") from e
        finally:
            remove_tree(partial)
            if not published and remove_tree(target):
                logger.warning(f"Removed bundle from an earlier build: {target}")
            if self.scratch_root is None:
                remove_tree(scratch_root)

        logger.info(f"Bundling completed: {target}")
        return target

    def _check_inputs(self, descriptor: BundleDescriptor) -> None:
        shared = descriptor.shared
        if shared.resources_dir is not None and not shared.resources_dir.is_dir():
            raise InputError(f"Shared resources directory does not exist: {shared.resources_dir}")
        for component in descriptor.components:
            self.builder.check_inputs(component)

    def _write_bundle(self, descriptor: BundleDescriptor, scratch: Path, partial: Path) -> None:
        self._check_inputs(descriptor)
        shared = descriptor.shared
        deps_dir = scratch / "deps"
        out_dir = ensure_directory(scratch / "out")

        logger.info(f"Resolving shared dependencies for {descriptor.application_name}")
        shared_libraries = self.resolver.resolve_all(shared.dependencies, deps_dir / "shared")

        logger.info(f"Building {len(descriptor.components)} components")
        builds: List[ComponentBuild] = []
        for component in descriptor.components:
            component_libraries = self.builder.resolve_dependencies(component, deps_dir / "components" / component.classname)
            builds.append(
                self.builder.build(
                    component,
                    shared_libraries,
                    component_libraries,
                    shared.config,
                    scratch / "build",
                    out_dir,
                )
            )

        logger.info("Packaging component library files")
        libraries = merge_libraries([shared_libraries] + [build.libraries for build in builds])
        lib_jar = pack_files([lib.path for lib in libraries], out_dir / LIBRARY_ENTRY, [lib.name for lib in libraries])

        entries = {
            ManifestKey.HAM_FILE: descriptor_entry(descriptor.application_name),
            ManifestKey.LIBRARY_JAR: lib_jar.name,
        }
        shared_resources_jar = None
        if shared.resources_dir is not None:
            shared_resources_jar = pack_directory(shared.resources_dir, out_dir / SHARED_RESOURCES_ENTRY)
            entries[ManifestKey.SHARED_RESOURCES_JAR] = shared_resources_jar.name

        app_descriptor = ArchivedApplicationDescriptor.create(
            descriptor.application_name,
            [ArchivedApplicationDescriptor.component(b.classname, b.config_name, b.has_resources) for b in builds],
            shared_resources=shared_resources_jar is not None,
        )
        manifest = BundleManifest(
            tool_version=__version__,
            application_name=descriptor.application_name,
            created_at=datetime.now().isoformat(),
            entries=entries,
        )

        logger.info("Packaging final bundle")
        with zipfile.ZipFile(partial, "w", zipfile.ZIP_DEFLATED) as zipf:
            zipf.writestr(MANIFEST_ENTRY, manifest.model_dump_json(indent=2))
            zipf.writestr(entries[ManifestKey.HAM_FILE], app_descriptor.to_json())
            for build in builds:
                zipf.write(build.archive, build.archive.name)
            zipf.write(lib_jar, lib_jar.name)
            if shared_resources_jar is not None:
                zipf.write(shared_resources_jar, shared_resources_jar.name)


def read_manifest(bundle_path: Path) -> BundleManifest:
    """Read the manifest of a bundle archive."""
    return BundleManifest.from_json(read_entry(bundle_path, MANIFEST_ENTRY))
