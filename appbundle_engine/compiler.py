"""Compiler collaborators used by the component builder."""

import os
import shutil
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from loguru import logger

from .fs import copy_file, ensure_directory, list_files
from .models import LibraryFile

DEFAULT_COMMAND = ("javac", "-d", "{output}", "-cp", "{classpath}", "{sources}")


@dataclass
class CompileResult:
    success: bool
    diagnostics: str = ""


class Compiler(ABC):
    """Interface for compiling one component's source tree."""

    @abstractmethod
    def compile(self, source_dir: Path, output_dir: Path, dependencies: Sequence[LibraryFile]) -> CompileResult:
        """
        Compile ``source_dir`` into ``output_dir``.

        Args:
            source_dir: Component source tree
            output_dir: Directory receiving compiled output
            dependencies: Merged library files visible to the compilation

        Returns:
            CompileResult with diagnostics on failure
        """
        pass


class CommandCompiler(Compiler):
    """Runs an external compiler command.

    ``{output}``, ``{classpath}`` and ``{sources}`` in the command are replaced by
    the output directory, the dependency classpath and the matched source files.
    """

    def __init__(self, command: Sequence[str] = DEFAULT_COMMAND, source_pattern: str = "*.java"):
        self.command = list(command)
        self.source_pattern = source_pattern

    def build_command(self, sources: Sequence[Path], output_dir: Path, dependencies: Sequence[LibraryFile]) -> List[str]:
        classpath = os.pathsep.join(str(lib.path) for lib in dependencies)
        args: List[str] = []
        for token in self.command:
            if token == "{sources}":
                args.extend(str(source) for source in sources)
            else:
                args.append(token.replace("{output}", str(output_dir)).replace("{classpath}", classpath))
        return args

    def compile(self, source_dir: Path, output_dir: Path, dependencies: Sequence[LibraryFile]) -> CompileResult:
        sources = list_files(source_dir, self.source_pattern)
        if not sources:
            return CompileResult(False, f"No sources matching {self.source_pattern} in {source_dir}")

        ensure_directory(output_dir)
        args = self.build_command(sources, output_dir, dependencies)
        logger.debug(f"Running compiler: {args[0]} ({len(sources)} sources)")
        try:
            result = subprocess.run(args, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True, check=False)
        except OSError as e:
            return CompileResult(False, f"Cannot run {args[0]}: {e}")

        if result.returncode != 0:
            return CompileResult(False, (result.stderr or result.stdout).strip())
        return CompileResult(True, result.stdout.strip())


class CopyCompiler(Compiler):
    """Copies the source tree verbatim, for components that need no compilation."""

    def __init__(self, pattern: str = "*", ignore: Optional[Sequence[str]] = ("__pycache__",)):
        self.pattern = pattern
        self.ignore = set(ignore or ())

    def compile(self, source_dir: Path, output_dir: Path, dependencies: Sequence[LibraryFile]) -> CompileResult:
        if not source_dir.is_dir():
            return CompileResult(False, f"Source directory does not exist: {source_dir}")

        ensure_directory(output_dir)
        for path in list_files(source_dir, self.pattern):
            relative = path.relative_to(source_dir)
            if self.ignore.intersection(relative.parts):
                continue
            copy_file(path, output_dir / relative)
        return CompileResult(True)


def get_compiler(name: str) -> Compiler:
    """Compiler by CLI name."""
    if name == "copy":
        return CopyCompiler()
    if name == "javac":
        if shutil.which("javac") is None:
            logger.warning("javac not found on PATH; component builds will fail")
        return CommandCompiler()
    raise ValueError(f"Unknown compiler: {name}")
