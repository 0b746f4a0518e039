"""CLI command that plans chunks for an analyzed document."""

import sys
from pathlib import Path

import click

from docingest.cli.commands import read_analysis_file
from docingest.config.loader import ConfigLoader
from docingest.lib.chunk_planner import ChunkPlanner, attach_chunk_uris
from docingest.lib.errors import ConfigError, DocIngestError
from docingest.lib.logging_config import get_logger, setup_logging
from docingest.lib.structure_builder import StructureBuilder
from docingest.lib.tokens import create_token_counter

logger = get_logger(__name__)


@click.command()
@click.argument("analysis_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--blob-name", required=True, help="Source blob name")
@click.option(
    "--blob-uri",
    required=True,
    help="Absolute URI of the source blob in the unprocessed folder",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help="Path to a docingest YAML config file or directory",
)
@click.option(
    "--target-size",
    type=click.IntRange(min=1),
    default=None,
    help="Chunk size bound in tokens (overrides config)",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory to write chunk JSON files to",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--quiet", "-q", is_flag=True, help="Only log warnings and errors")
def chunk(
    analysis_json: str,
    blob_name: str,
    blob_uri: str,
    config_path: str | None,
    target_size: int | None,
    output_dir: str | None,
    verbose: bool,
    quiet: bool,
) -> None:
    """Plan size-bounded chunks for a layout-analysis result.

    ANALYSIS_JSON is the layout service's JSON output for one document.
    Without --output-dir a one-line summary per chunk is printed.
    """
    setup_logging(verbose=verbose, quiet=quiet)
    logger.info(
        f"Chunk command invoked: analysis={analysis_json}, blob={blob_name}, "
        f"target_size={target_size}"
    )

    try:
        config = ConfigLoader().load(config_path)
        planner = ChunkPlanner(
            target_size=target_size or config.chunk_target_size,
            folders=config.storage,
            token_counter=create_token_counter(config.token_counter),
        )

        document = read_analysis_file(analysis_json)
        records = StructureBuilder().build(document)
        chunks = planner.plan(records, blob_name, blob_uri)
        if config.container_base_uri:
            chunks = attach_chunk_uris(chunks, config.container_base_uri)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}", exc_info=True)
        click.secho("Error: Failed to load configuration", fg="red", err=True)
        click.echo(f"  {str(e)}", err=True)
        sys.exit(1)
    except DocIngestError as e:
        logger.error(f"Chunk planning failed: {e}", exc_info=True)
        click.secho("Error: Failed to plan chunks", fg="red", err=True)
        click.echo(f"  {str(e)}", err=True)
        sys.exit(1)

    if output_dir is None:
        for planned in chunks:
            doc = planned.document
            click.echo(
                f"{doc.chunk_file}\t{doc.token_count} tokens\t"
                f"pages={doc.pages}"
            )
        return

    target = Path(output_dir)
    target.mkdir(parents=True, exist_ok=True)
    for planned in chunks:
        (target / planned.document.chunk_file).write_text(
            planned.document.to_json(), encoding="utf-8"
        )
    click.echo(f"Wrote {len(chunks)} chunks to {target}")
