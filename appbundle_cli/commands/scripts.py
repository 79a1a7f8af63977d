"""Scripts command."""

import click
from pathlib import Path
from typing import Optional

from appbundle_engine.errors import BundleError
from appbundle_engine.launch import export_scripts

from ..config import get_install_paths


@click.command()
@click.option("--home", type=click.Path(file_okay=False, path_type=Path), help="Installation home directory")
def scripts(home: Optional[Path]):
    """Regenerate the runtime start and stop scripts."""
    paths = get_install_paths(home)

    try:
        start_script, stop_script = export_scripts(paths)
    except BundleError as e:
        click.echo(f"❌ {e}", err=True)
        raise click.Abort()

    click.echo(f"✅ Scripts written: {start_script}, {stop_script}")
