"""Undeploy command."""

import click
from pathlib import Path
from typing import Optional

from appbundle_engine.deploy import DeploymentInstaller
from appbundle_engine.errors import BundleError
from appbundle_engine.launch import export_scripts

from ..config import get_install_paths


@click.command()
@click.argument("app_name")
@click.option("--home", type=click.Path(file_okay=False, path_type=Path), help="Installation home directory")
def undeploy(app_name: str, home: Optional[Path]):
    """Undeploy the application APP_NAME (case sensitive)."""
    paths = get_install_paths(home)

    try:
        removed = DeploymentInstaller(paths).undeploy(app_name)
        if not removed:
            click.echo(f"❌ No such application: {app_name}", err=True)
            raise click.Abort()
        export_scripts(paths)
    except BundleError as e:
        click.echo(f"❌ Undeploying failed: {e}", err=True)
        raise click.Abort()

    click.echo(f"✅ {app_name} successfully removed.")
