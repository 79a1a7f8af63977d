from pathlib import Path

from click.testing import CliRunner

from appbundle_cli.main import cli

from conftest import orders_project


def run(*args: str):
    return CliRunner().invoke(cli, list(args))


def test_bundle_deploy_list_undeploy(tmp_path: Path) -> None:
    home = tmp_path / "home"
    descriptor = orders_project(tmp_path / "project")

    result = run("bundle", str(descriptor), str(tmp_path / "dist"), "--compiler", "copy", "--home", str(home))
    assert result.exit_code == 0, result.output
    assert "Bundling completed" in result.output
    bundle = tmp_path / "dist" / "Orders.hab"
    assert bundle.is_file()

    result = run("deploy", str(bundle), "--home", str(home))
    assert result.exit_code == 0, result.output
    assert (home / "apps" / "Orders" / "M1" / "M1.jar").is_file()
    assert (home / "bin" / "appbundle-start").is_file()

    result = run("list", "--home", str(home))
    assert result.exit_code == 0
    assert "1 deployed applications" in result.output
    assert "Orders (M1, M2)" in result.output

    result = run("undeploy", "Orders", "--home", str(home))
    assert result.exit_code == 0, result.output
    assert not (home / "apps" / "Orders").exists()

    result = run("list", "--home", str(home))
    assert "There are no applications deployed." in result.output


def test_undeploy_unknown_application(tmp_path: Path) -> None:
    result = run("undeploy", "Nope", "--home", str(tmp_path / "home"))
    assert result.exit_code != 0
    assert "No such application: Nope" in result.output


def test_bundle_reports_invalid_descriptor(tmp_path: Path) -> None:
    descriptor = tmp_path / "bad.json"
    descriptor.write_text('{"application_name": "X", "components": []}')

    result = run("bundle", str(descriptor), str(tmp_path / "dist"), "--home", str(tmp_path / "home"))

    assert result.exit_code != 0
    assert "Bundling failed" in result.output
    assert not (tmp_path / "dist" / "X.hab").exists()


def test_home_from_environment(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("APPBUNDLE_HOME", str(tmp_path / "env-home"))
    result = run("scripts")
    assert result.exit_code == 0, result.output
    assert (tmp_path / "env-home" / "bin" / "appbundle-stop").is_file()
