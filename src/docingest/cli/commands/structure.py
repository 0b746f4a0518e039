"""CLI command that prints the structure records of an analyzed document."""

import json
import sys
from pathlib import Path

import click

from docingest.cli.commands import read_analysis_file
from docingest.lib.errors import DocIngestError
from docingest.lib.logging_config import get_logger, setup_logging
from docingest.lib.structure_builder import StructureBuilder

logger = get_logger(__name__)


@click.command()
@click.argument("analysis_json", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the records to this file instead of stdout",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--quiet", "-q", is_flag=True, help="Only log warnings and errors")
def structure(
    analysis_json: str, output: str | None, verbose: bool, quiet: bool
) -> None:
    """Build structure records from a layout-analysis result.

    ANALYSIS_JSON is the layout service's JSON output for one document.
    """
    setup_logging(verbose=verbose, quiet=quiet)
    logger.info(f"Structure command invoked: analysis={analysis_json}")

    try:
        document = read_analysis_file(analysis_json)
        records = StructureBuilder().build(document)
    except DocIngestError as e:
        logger.error(f"Structure build failed: {e}", exc_info=True)
        click.secho("Error: Failed to build document structure", fg="red", err=True)
        click.echo(f"  {str(e)}", err=True)
        sys.exit(1)

    rendered = json.dumps(
        [record.model_dump(mode="json") for record in records],
        indent=2,
        ensure_ascii=False,
    )

    if output is None:
        click.echo(rendered)
        return

    Path(output).write_text(rendered, encoding="utf-8")
    click.echo(f"Wrote {len(records)} structure records to {output}")
