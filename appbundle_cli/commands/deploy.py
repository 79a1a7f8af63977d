"""Deploy command."""

import click
from pathlib import Path
from typing import Optional

from appbundle_engine.deploy import DeploymentInstaller
from appbundle_engine.errors import BundleError
from appbundle_engine.launch import export_scripts

from ..config import get_install_paths


@click.command()
@click.argument("bundle_path", type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path))
@click.option("--home", type=click.Path(file_okay=False, path_type=Path), help="Installation home directory")
@click.option("--no-scripts", is_flag=True, help="Skip regenerating the launch scripts")
def deploy(bundle_path: Path, home: Optional[Path], no_scripts: bool):
    """Deploy a bundle, replacing any application with the same name."""
    paths = get_install_paths(home)
    click.echo(f"🚀 Deploying bundle: {bundle_path.name}")

    try:
        app_dir = DeploymentInstaller(paths).deploy(bundle_path)
        click.echo(f"✅ Deployed to: {app_dir}")

        if not no_scripts:
            start_script, stop_script = export_scripts(paths)
            click.echo(f"   Scripts updated: {start_script.name}, {stop_script.name}")
    except BundleError as e:
        click.echo(f"❌ Deploying failed: {e}", err=True)
        raise click.Abort()

    click.echo("   Restart the runtime to load the new application.")
