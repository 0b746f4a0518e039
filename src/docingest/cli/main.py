"""Command line entry point for docingest."""

import click
from dotenv import load_dotenv

from docingest import __version__
from docingest.cli.commands.chunk import chunk
from docingest.cli.commands.structure import structure


@click.group()
@click.version_option(version=__version__, prog_name="docingest")
def cli() -> None:
    """docingest: turn PDF layout analysis into indexed, enriched chunks."""
    # Values in the environment win over .env entries
    load_dotenv(override=False)


cli.add_command(structure)
cli.add_command(chunk)


def main() -> None:
    """Run the docingest CLI."""
    cli()


if __name__ == "__main__":
    main()
