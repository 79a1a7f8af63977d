import os
import sys
from pathlib import Path

import pytest

from appbundle_engine.compiler import CommandCompiler, CopyCompiler, get_compiler
from appbundle_engine.models import LibraryFile
from appbundle_engine.templating import render_template, rendered_name

from conftest import make_source, write_file


def test_command_expands_placeholders(tmp_path: Path) -> None:
    compiler = CommandCompiler()
    libs = [LibraryFile(name="a.jar", path=Path("/l/a.jar")), LibraryFile(name="b.jar", path=Path("/l/b.jar"))]
    sources = [Path("/s/A.java"), Path("/s/B.java")]

    args = compiler.build_command(sources, Path("/out"), libs)

    assert args == ["javac", "-d", "/out", "-cp", f"/l/a.jar{os.pathsep}/l/b.jar", "/s/A.java", "/s/B.java"]


def test_command_compiler_success(tmp_path: Path) -> None:
    script = "import pathlib, sys; pathlib.Path(sys.argv[1], 'Main.class').write_text(str(len(sys.argv) - 2))"
    compiler = CommandCompiler([sys.executable, "-c", script, "{output}", "{sources}"])

    result = compiler.compile(make_source(tmp_path / "src", ["Main", "Util"]), tmp_path / "out", [])

    assert result.success
    assert (tmp_path / "out" / "Main.class").read_text() == "2"


def test_command_compiler_failure_carries_diagnostics(tmp_path: Path) -> None:
    script = "import sys; sys.stderr.write('Main.java:1: error'); sys.exit(1)"
    compiler = CommandCompiler([sys.executable, "-c", script, "{sources}"])

    result = compiler.compile(make_source(tmp_path / "src"), tmp_path / "out", [])

    assert not result.success
    assert result.diagnostics == "Main.java:1: error"


def test_command_compiler_without_sources(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    result = CommandCompiler().compile(tmp_path / "src", tmp_path / "out", [])
    assert not result.success
    assert "No sources" in result.diagnostics


def test_command_compiler_missing_executable(tmp_path: Path) -> None:
    compiler = CommandCompiler(["definitely-not-a-compiler-xyz", "{sources}"])
    result = compiler.compile(make_source(tmp_path / "src"), tmp_path / "out", [])
    assert not result.success
    assert "Cannot run" in result.diagnostics


def test_copy_compiler_copies_tree(tmp_path: Path) -> None:
    write_file(tmp_path / "src" / "pkg" / "mod.py", "x = 1")
    write_file(tmp_path / "src" / "pkg" / "__pycache__" / "mod.cpython.pyc", "")

    result = CopyCompiler().compile(tmp_path / "src", tmp_path / "out", [])

    assert result.success
    assert (tmp_path / "out" / "pkg" / "mod.py").read_text() == "x = 1"
    assert not (tmp_path / "out" / "pkg" / "__pycache__").exists()


def test_get_compiler() -> None:
    assert isinstance(get_compiler("copy"), CopyCompiler)
    with pytest.raises(ValueError):
        get_compiler("gcc")


@pytest.mark.parametrize(
    "name,expected",
    [("app.xml.template", "app.xml"), ("app.properties.tmpl", "app.properties"), ("app.xml", "app.xml")],
)
def test_rendered_name(name: str, expected: str) -> None:
    assert rendered_name(Path(name)) == expected


def test_render_template(tmp_path: Path) -> None:
    template = write_file(tmp_path / "db.conf.template", "url=${url}\nliteral=$$HOME\n")
    target = render_template(template, {"url": "jdbc:h2"}, tmp_path / "out")
    assert target == tmp_path / "out" / "db.conf"
    assert target.read_text() == "url=jdbc:h2\nliteral=$HOME\n"
