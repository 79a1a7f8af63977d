"""Component builder - compiles and packages one component of a bundle."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Sequence

from loguru import logger

from ..archive import pack_directory, pack_files
from ..compiler import Compiler
from ..dependencies import DependencyResolver, merge_libraries
from ..errors import CompileError, InputError
from ..fs import scratch_directory
from ..models import ComponentDescriptor, LibraryFile
from ..templating import render_template
from .schema import component_entry, component_resources_entry

TemplateRenderer = Callable[[Path, Mapping[str, str], Path], Path]


@dataclass
class ComponentBuild:
    """Output of building one component."""

    classname: str
    archive: Path
    libraries: List[LibraryFile] = field(default_factory=list)
    config_name: Optional[str] = None
    has_resources: bool = False


class ComponentBuilder:
    """Builds component archives.

    The final archive ``<classname>.jar`` contains the class archive (also named
    ``<classname>.jar``), the rendered configuration file if any, and a
    ``<classname>-resources.jar`` if the component declares resources.
    """

    def __init__(self, compiler: Compiler, resolver: DependencyResolver, renderer: TemplateRenderer = render_template):
        self.compiler = compiler
        self.resolver = resolver
        self.renderer = renderer

    def resolve_dependencies(self, component: ComponentDescriptor, deps_dir: Path) -> List[LibraryFile]:
        """Resolve the component's own dependencies into ``deps_dir``."""
        return self.resolver.resolve_all(component.dependencies, deps_dir)

    def check_inputs(self, component: ComponentDescriptor) -> None:
        """Fail with InputError if any path the component declares is missing."""
        classname = component.classname
        if not component.source_dir.is_dir():
            raise InputError(f"Source directory for {classname} does not exist: {component.source_dir}")
        if component.config_template is not None and not component.config_template.is_file():
            raise InputError(f"Config template for {classname} does not exist: {component.config_template}")
        if component.resources_dir is not None and not component.resources_dir.is_dir():
            raise InputError(f"Resources directory for {classname} does not exist: {component.resources_dir}")

    def build(
        self,
        component: ComponentDescriptor,
        shared_libraries: Sequence[LibraryFile],
        component_libraries: Sequence[LibraryFile],
        shared_config: Mapping[str, str],
        scratch_root: Path,
        output_dir: Path,
    ) -> ComponentBuild:
        """
        Compile and package one component.

        Args:
            component: Component descriptor
            shared_libraries: Libraries resolved from the shared scope
            component_libraries: Libraries resolved from the component's own
                dependencies (see :meth:`resolve_dependencies`)
            shared_config: Values for config template substitution
            scratch_root: Parent of the per-component build directory
            output_dir: Directory receiving the final component archive

        Returns:
            ComponentBuild describing the archive and the component's own libraries
        """
        classname = component.classname
        self.check_inputs(component)
        libraries = merge_libraries([shared_libraries, component_libraries])

        logger.info(f"Building component {classname} against {len(libraries)} libraries")
        with scratch_directory(scratch_root / classname) as build_dir:
            class_dir = build_dir / "classes"
            result = self.compiler.compile(component.source_dir, class_dir, libraries)
            if not result.success:
                raise CompileError(classname, result.diagnostics)

            class_jar = pack_directory(class_dir, build_dir / component_entry(classname))
            members = [class_jar]

            config_name = None
            if component.config_template is not None:
                config_file = self.renderer(component.config_template, shared_config, build_dir / "config")
                config_name = config_file.name
                members.append(config_file)

            if component.resources_dir is not None:
                members.append(pack_directory(component.resources_dir, build_dir / component_resources_entry(classname)))

            archive = pack_files(members, output_dir / component_entry(classname))

        logger.debug(f"Packaged {archive.name} ({len(members)} entries)")
        return ComponentBuild(
            classname=classname,
            archive=archive,
            libraries=list(component_libraries),
            config_name=config_name,
            has_resources=component.resources_dir is not None,
        )
