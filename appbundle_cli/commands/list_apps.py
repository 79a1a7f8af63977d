"""List command."""

import click
from pathlib import Path
from typing import Optional

from appbundle_engine.deploy import DeploymentInstaller
from appbundle_engine.errors import BundleError

from ..config import get_install_paths


@click.command(name="list")
@click.option("--home", type=click.Path(file_okay=False, path_type=Path), help="Installation home directory")
def list_apps(home: Optional[Path]):
    """List the names of all deployed applications."""
    paths = get_install_paths(home)

    try:
        applications = DeploymentInstaller(paths).list_applications()
    except BundleError as e:
        click.echo(f"❌ {e}", err=True)
        raise click.Abort()

    if not applications:
        click.echo("There are no applications deployed.")
        return

    click.echo(f"{len(applications)} deployed applications:")
    for application in applications:
        click.echo(f"    {application.application_name} ({', '.join(application.classnames)})")
