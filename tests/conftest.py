import json
from pathlib import Path
from typing import Dict, List, Sequence

import pytest

from appbundle_engine.compiler import CompileResult, Compiler
from appbundle_engine.models import InstallPaths, LibraryFile


class FakeCompiler(Compiler):
    """Writes one ``.class`` file per source file and records every invocation."""

    def __init__(self, fail_for: Sequence[str] = ()):
        self.fail_for = set(fail_for)
        self.calls: List[Dict[str, object]] = []

    def compile(self, source_dir: Path, output_dir: Path, dependencies: Sequence[LibraryFile]) -> CompileResult:
        self.calls.append({"source_dir": source_dir, "dependencies": [lib.name for lib in dependencies]})
        if source_dir.name in self.fail_for:
            return CompileResult(False, f"{source_dir.name}/Main.java:1: error: ';' expected")
        output_dir.mkdir(parents=True, exist_ok=True)
        for source in sorted(source_dir.rglob("*.java")):
            target = output_dir / source.relative_to(source_dir).with_suffix(".class")
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(b"CAFEBABE" + source.read_bytes())
        return CompileResult(True)


def write_file(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def make_libs(directory: Path, names: Sequence[str], tag: str = "") -> Path:
    for name in names:
        write_file(directory / name, f"{name}{tag}")
    return directory


def make_source(directory: Path, classes: Sequence[str] = ("Main",)) -> Path:
    for name in classes:
        write_file(directory / f"{name}.java", f"class {name} {{}}")
    return directory


def write_descriptor(path: Path, payload: Dict[str, object]) -> Path:
    return write_file(path, json.dumps(payload, indent=2))


def orders_project(root: Path, shared_resources: bool = True, m1_resources: bool = True) -> Path:
    """Orders application: shared deps {A}, M1 deps {B}, M2 deps {A, C}."""
    make_libs(root / "shared-lib", ["A.jar"], tag="-shared")
    make_libs(root / "m1-lib", ["B.jar"])
    make_libs(root / "m2-lib", ["A.jar", "C.jar"], tag="-m2")
    make_source(root / "M1", ["OrderService", "OrderRepository"])
    make_source(root / "M2", ["Billing"])
    write_file(root / "M1-config" / "m1.properties.template", "db=${db_url}\n")

    shared: Dict[str, object] = {"dependencies": ["shared-lib"], "config": {"db_url": "jdbc:h2:mem:orders"}}
    if shared_resources:
        write_file(root / "shared-res" / "banner.txt", "Orders")
        write_file(root / "shared-res" / "i18n" / "en.properties", "hello=Hello")
        shared["resources_dir"] = "shared-res"

    m1: Dict[str, object] = {
        "classname": "M1",
        "source_dir": "M1",
        "config_template": "M1-config/m1.properties.template",
        "dependencies": [{"path": "m1-lib", "pattern": "*.jar"}],
    }
    if m1_resources:
        write_file(root / "M1-res" / "templates" / "order.html", "<html></html>")
        m1["resources_dir"] = "M1-res"

    payload = {
        "application_name": "Orders",
        "shared_scope": shared,
        "components": [m1, {"classname": "M2", "source_dir": "M2", "dependencies": ["m2-lib"]}],
    }
    return write_descriptor(root / "orders.json", payload)


def tree(root: Path) -> Dict[str, bytes]:
    """Relative path -> content for every file under ``root``."""
    return {p.relative_to(root).as_posix(): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()}


@pytest.fixture
def install_paths(tmp_path: Path) -> InstallPaths:
    paths = InstallPaths(home_dir=tmp_path / "home")
    for directory in (paths.bin_dir, paths.apps_dir, paths.config_dir, paths.temp_dir, paths.log_dir):
        directory.mkdir(parents=True)
    return paths


@pytest.fixture
def compiler() -> FakeCompiler:
    return FakeCompiler()

