import logging

import click

from eventquote.infrastructure.cli.delivery_commands import delivery
from eventquote.infrastructure.cli.quote_commands import quote


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log pricing decisions.")
def cli(verbose: bool) -> None:
    """eventquote: event order pricing"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register subcommands
cli.add_command(quote)
cli.add_command(delivery)
