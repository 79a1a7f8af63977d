"""CLI entrypoint."""

import sys

import click
from loguru import logger

from appbundle_engine.version import __version__

from .commands.bundle import bundle
from .commands.deploy import deploy
from .commands.undeploy import undeploy
from .commands.list_apps import list_apps
from .commands.scripts import scripts


@click.group()
@click.version_option(version=__version__, prog_name="appbundle")
@click.option("-v", "--verbose", is_flag=True, help="Show detailed pipeline logs")
def cli(verbose: bool):
    """appbundle - Build application bundles and deploy them onto a runtime installation."""
    logger.remove()
    logger.add(lambda message: sys.stderr.write(message), level="DEBUG" if verbose else "WARNING")


cli.add_command(bundle)
cli.add_command(deploy)
cli.add_command(undeploy)
cli.add_command(list_apps)
cli.add_command(scripts)


if __name__ == "__main__":
    cli()
