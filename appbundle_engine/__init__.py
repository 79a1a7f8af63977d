"""Build, package and deploy component applications onto a runtime installation."""

from .version import __version__
from .errors import BundleError, BundleIOError, CompileError, InputError
from .models import (
    BundleDescriptor,
    ComponentDescriptor,
    DependencyRef,
    InstallPaths,
    LibraryFile,
    RuntimeConfig,
    SharedScope,
    load_bundle_descriptor,
)
from .dependencies import DependencyResolver, LocalDependencyResolver, merge_libraries
from .compiler import CommandCompiler, CompileResult, Compiler, CopyCompiler
from .bundle import BundleAssembler, read_manifest
from .deploy import DeploymentInstaller
from .launch import build_classpath, export_scripts, render_script

__all__ = [
    "__version__",
    "BundleError",
    "BundleIOError",
    "CompileError",
    "InputError",
    "BundleDescriptor",
    "ComponentDescriptor",
    "DependencyRef",
    "InstallPaths",
    "LibraryFile",
    "RuntimeConfig",
    "SharedScope",
    "load_bundle_descriptor",
    "DependencyResolver",
    "LocalDependencyResolver",
    "merge_libraries",
    "CommandCompiler",
    "CompileResult",
    "Compiler",
    "CopyCompiler",
    "BundleAssembler",
    "read_manifest",
    "DeploymentInstaller",
    "build_classpath",
    "export_scripts",
    "render_script",
]
