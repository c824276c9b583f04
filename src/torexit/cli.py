"""
torexit command line entry point.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import click

from torexit import __version__
from torexit.config import get_config
from torexit.detector.cli import detector
from torexit.logging_config import configure_logging


@click.group()
@click.version_option(__version__, prog_name="torexit")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also log to this file")
def cli(debug: bool, log_file: str | None):
    """torexit - Tor exit node detection."""
    configure_logging(debug=debug, log_file=log_file, level=get_config().log_level)


cli.add_command(detector)


def main():
    cli()


if __name__ == "__main__":
    main()
