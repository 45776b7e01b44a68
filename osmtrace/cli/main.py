"""Command line interface for OsmTrace built on click."""

import logging
import sys
from pathlib import Path

import click

from .. import __version__
from ..api.core import MapExtract
from ..core.config import Config
from ..core.constants import ResolutionMode
from ..core.error_handling import OsmTraceError
from ..core.logging_config import setup_logging
from ..osmapi.client import BoundingBox, OSMApiClient
from ..osmapi.exceptions import OSMApiError
from ..parsers.osm_parser import parse_document

logger = logging.getLogger(__name__)


def common_options(func):
    """Common CLI options decorator."""
    func = click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")(
        func
    )
    func = click.option(
        "--quiet", "-q", is_flag=True, help="Suppress non-error log output"
    )(func)
    func = click.option(
        "--config",
        "-c",
        "config_path",
        default=None,
        help="Configuration file path (default: search for osmtrace_config.toml)",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
    )(func)
    func = click.option("--log-file", help="Log file path")(func)
    return func


def _prepare(verbose: bool, quiet: bool, config_path, log_file) -> Config:
    """Load configuration and set up logging for a command."""
    try:
        config = Config(config_path)
        config.validate()
    except OsmTraceError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    if verbose:
        level = "DEBUG"
    elif quiet:
        level = "ERROR"
    else:
        level = config.get("logging", "level", "INFO")
    setup_logging(level=level, log_file=log_file or config.get("logging", "file", ""))
    logger.debug(f"Using configuration from {config.path or 'built-in defaults'}")
    return config


def _load(osm_file: Path, config: Config) -> MapExtract:
    """Parse an OSM file, exiting with status 1 on failure."""
    try:
        return MapExtract.from_file(osm_file, config=config)
    except OsmTraceError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="OsmTrace")
def cli():
    """OsmTrace - Parse OpenStreetMap extracts and resolve ways into coordinates."""


@cli.command()
@click.argument("osm_file", type=click.Path(exists=True, path_type=Path))
@common_options
def summary(osm_file, verbose, quiet, config_path, log_file):
    """Show node, way and dangling reference counts of OSM_FILE."""
    config = _prepare(verbose, quiet, config_path, log_file)
    extract = _load(osm_file, config)

    click.echo(f"Source: {extract.source}")
    click.echo(f"Nodes: {len(extract.document.points)}")
    click.echo(f"Ways: {len(extract.document.paths)}")
    click.echo(f"Dangling references: {len(extract.dangling_references())}")


@cli.command()
@click.argument("osm_file", type=click.Path(exists=True, path_type=Path))
@common_options
def ways(osm_file, verbose, quiet, config_path, log_file):
    """List every way of OSM_FILE with its tags."""
    config = _prepare(verbose, quiet, config_path, log_file)
    extract = _load(osm_file, config)

    listings = extract.way_listing()
    if not listings:
        click.echo("No OSM way data available")
        return

    for listing in listings:
        click.echo(str(listing))


@cli.command()
@click.argument("osm_file", type=click.Path(exists=True, path_type=Path))
@click.argument("way_id")
@click.option(
    "--skip-dangling",
    is_flag=True,
    help="Skip references without a matching node instead of failing",
)
@common_options
def resolve(osm_file, way_id, skip_dangling, verbose, quiet, config_path, log_file):
    """Print the nodes traversed by WAY_ID as id, latitude and longitude."""
    config = _prepare(verbose, quiet, config_path, log_file)
    extract = _load(osm_file, config)

    way = extract.way(way_id)
    if way is None:
        click.echo(f"Error: No way with id '{way_id}' in {osm_file}", err=True)
        sys.exit(1)

    mode = ResolutionMode.SKIP if skip_dangling else None
    try:
        for point in extract.points(way, mode):
            click.echo(f"{point.identifier}\t{point.latitude}\t{point.longitude}")
    except OsmTraceError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("osm_file", type=click.Path(exists=True, path_type=Path))
@common_options
def check(osm_file, verbose, quiet, config_path, log_file):
    """Report every way reference in OSM_FILE that has no matching node."""
    config = _prepare(verbose, quiet, config_path, log_file)
    extract = _load(osm_file, config)

    dangling = extract.dangling_references()
    if not dangling:
        click.echo("All way references resolve")
        return

    for message in dangling:
        click.echo(message)
    click.echo(f"{len(dangling)} dangling references", err=True)
    sys.exit(1)


@cli.command()
@click.option(
    "--bbox",
    required=True,
    help="min_lon,min_lat,max_lon,max_lat, e.g. 10.2,63.4,10.3,63.41",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the OSM XML here instead of standard output",
)
@common_options
def fetch(bbox, output, verbose, quiet, config_path, log_file):
    """Download the OSM extract of a bounding box."""
    config = _prepare(verbose, quiet, config_path, log_file)

    try:
        box = BoundingBox.parse(bbox)
        data = OSMApiClient.from_config(config).fetch_map(box)
        document = parse_document(data)
    except (OSMApiError, OsmTraceError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    # Bytes are written untouched so the declared encoding stays valid
    if output:
        output.write_bytes(data)
        click.echo(
            f"Saved {len(document.points)} nodes and {len(document.paths)} ways "
            f"to {output}"
        )
    else:
        click.echo(data, nl=False)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
