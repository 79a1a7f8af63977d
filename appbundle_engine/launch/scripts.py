"""Launch script builder - classpath scanning and jsvc start/stop scripts."""

import os
import stat
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from loguru import logger

from ..errors import BundleIOError, InputError
from ..fs import ensure_directory, list_files
from ..models import InstallPaths, RuntimeConfig

DEFAULT_LAUNCHER = "appbundle.runtime.Launcher"
JSVC_OSX = "jsvc-osx-v1.0.5"
JSVC_LINUX = "jsvc-linux-1.0.5"
JSVC_OUT = "jsvc.out"
JSVC_ERROR = "jsvc.error"
JSVC_PID = "jsvc.pid"
START_SCRIPT = "appbundle-start"
STOP_SCRIPT = "appbundle-stop"
SCRIPT_MODES = ("start", "stop")


@dataclass(frozen=True)
class ScriptConfig:
    """Everything a launch script needs besides the classpath."""

    jsvc_path: Path
    out_file: Path
    err_file: Path
    pid_file: Path
    config_file: Path
    memory_min: str = "128m"
    memory_max: str = "512m"
    file_encoding: str = "UTF-8"
    launcher: str = DEFAULT_LAUNCHER
    java_home: Optional[str] = None

    @classmethod
    def for_installation(
        cls, paths: InstallPaths, runtime: RuntimeConfig, platform: str = sys.platform
    ) -> "ScriptConfig":
        if platform == "darwin":
            jsvc, java_home = JSVC_OSX, "$(/usr/libexec/java_home)"
        else:
            jsvc, java_home = JSVC_LINUX, "/usr/lib/jvm/default-java"
        return cls(
            jsvc_path=paths.bin_dir / jsvc,
            out_file=paths.log_dir / JSVC_OUT,
            err_file=paths.log_dir / JSVC_ERROR,
            pid_file=paths.bin_dir / JSVC_PID,
            config_file=paths.config_file,
            memory_min=runtime.memory_min,
            memory_max=runtime.memory_max,
            file_encoding=runtime.file_encoding,
            launcher=runtime.launcher or DEFAULT_LAUNCHER,
            java_home=java_home,
        )


def build_classpath(platform_lib_dir: Path, apps_root_dir: Path) -> str:
    """Every ``.jar`` under the platform library dir, then under the apps root.

    Platform entries come first so platform versions win at class loading.
    """
    entries = [p.resolve() for p in list_files(platform_lib_dir, "*.jar")]
    entries += [p.resolve() for p in list_files(apps_root_dir, "*.jar")]
    return os.pathsep.join(str(entry) for entry in entries)


def render_script(mode: str, classpath: str, config: ScriptConfig) -> str:
    """Render the start or stop script text."""
    if mode not in SCRIPT_MODES:
        raise InputError(f"Unknown script mode: {mode} (expected one of {', '.join(SCRIPT_MODES)})")

    lines = ["#!/bin/sh", ""]
    if config.java_home:
        lines.append(f"export JAVA_HOME={config.java_home}")
    lines.append("export PATH=$JAVA_HOME:$PATH")

    command = [
        str(config.jsvc_path),
        f"-outfile {config.out_file}",
        f"-errfile {config.err_file}",
        f"-jvm server -Xms{config.memory_min} -Xmx{config.memory_max}",
        f"-Dfile.encoding={config.file_encoding}",
        f"-pidfile {config.pid_file}",
    ]
    if mode == "stop":
        command.append("-stop")
    command.append("-wait 10")
    if classpath:
        command.append(f"-cp {classpath}")
    command += [config.launcher, str(config.config_file)]
    lines.append(" ".join(command))
    return "\n".join(lines) + "\n"


def export_scripts(
    paths: InstallPaths, runtime: Optional[RuntimeConfig] = None, platform: str = sys.platform
) -> Tuple[Path, Path]:
    """Write executable start and stop scripts into the installation's bin dir."""
    runtime = runtime or RuntimeConfig.load(paths)
    config = ScriptConfig.for_installation(paths, runtime, platform)
    classpath = build_classpath(paths.bin_dir, paths.apps_dir)

    ensure_directory(paths.bin_dir)
    written = []
    for mode, name in (("start", START_SCRIPT), ("stop", STOP_SCRIPT)):
        target = paths.bin_dir / name
        try:
            target.write_text(render_script(mode, classpath, config), encoding="utf-8")
            target.chmod(target.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        except OSError as e:
            raise BundleIOError(target, f"Cannot write launch script ({e.strerror})") from e
        written.append(target)

    logger.info(f"Exported launch scripts to {paths.bin_dir}")
    return written[0], written[1]
