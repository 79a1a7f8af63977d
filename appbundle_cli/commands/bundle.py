"""Bundle command."""

import click
from pathlib import Path
from typing import Optional

from appbundle_engine.bundle import BundleAssembler
from appbundle_engine.compiler import get_compiler
from appbundle_engine.errors import BundleError
from appbundle_engine.models import load_bundle_descriptor

from ..config import get_install_paths


@click.command()
@click.argument("descriptor", type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path))
@click.argument("target_dir", type=click.Path(file_okay=False, dir_okay=True, path_type=Path))
@click.option(
    "--compiler",
    type=click.Choice(["javac", "copy"]),
    default="javac",
    show_default=True,
    help="How component sources are compiled",
)
@click.option("--home", type=click.Path(file_okay=False, path_type=Path), help="Installation home directory")
def bundle(descriptor: Path, target_dir: Path, compiler: str, home: Optional[Path]):
    """Create an application bundle (.hab) from a bundle DESCRIPTOR."""
    paths = get_install_paths(home)
    click.echo(f"📦 Bundling: {descriptor}")

    try:
        bundle_descriptor = load_bundle_descriptor(descriptor)
        click.echo(f"   Application: {bundle_descriptor.application_name}")
        click.echo(f"   Components: {len(bundle_descriptor.components)}")

        assembler = BundleAssembler(get_compiler(compiler), scratch_root=paths.temp_dir)
        bundle_path = assembler.assemble(bundle_descriptor, target_dir)
    except BundleError as e:
        click.echo(f"❌ Bundling failed: {e}", err=True)
        raise click.Abort()

    click.echo(f"✅ Bundling completed: {bundle_path}")
