# src/textmetrics/cli.py
"""
Main CLI entry point for textmetrics.
Extracts metrics tables from fonts and runs queries against them.
"""

import logging
from pathlib import Path

import click
from pydantic import ValidationError

from .core import shorten, width, wrap
from .errors import TextMetricsError
from .font_utils import dump_metrics, load_metrics
from .models import DEFAULT_TERMINATOR, WrapMode

logger = logging.getLogger(__name__)

METRICS_PATH = click.Path(exists=True, dir_okay=False, path_type=Path)


def _load(metrics_path: Path):
    try:
        return load_metrics(metrics_path)
    except (OSError, TextMetricsError, ValidationError) as e:
        logger.error("Failed to load metrics from %s: %s", metrics_path, e)
        raise click.Abort()


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--debug", is_flag=True, help="Enable debug logging.")
def main(debug):
    """
    textmetrics: measure, shorten and wrap text using font metrics.

    METRICS arguments accept either a metrics JSON file or a font file.
    """
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - [%(filename)s:%(lineno)d] %(funcName)s - %(message)s",
        force=True,  # Ensure we override any existing handlers
    )


@main.command(name="extract")
@click.argument("font_file", type=METRICS_PATH)
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Output JSON path")
@click.option(
    "--range",
    "range_names",
    multiple=True,
    help="Only extract a named unicode range (e.g. latin, cyrillic). Repeatable.",
)
def extract_command(font_file, output, range_names):
    """
    Build a metrics JSON file from FONT_FILE.
    """
    if not output:
        output = font_file.with_suffix(".metrics.json")

    try:
        metrics = load_metrics(font_file, list(range_names) or None)
    except (OSError, TextMetricsError, ValidationError) as e:
        logger.error("Failed to extract metrics: %s", e)
        raise click.Abort()

    dump_metrics(metrics, output)
    click.echo(f"Wrote {len(metrics.advances)} advances to {output}")


@main.command(name="width")
@click.argument("metrics_file", type=METRICS_PATH)
@click.argument("text")
@click.option("--pixels", "-p", type=float, default=None, help="Pixel size.")
@click.option("--kern", is_flag=True, help="Apply kerning.")
def width_command(metrics_file, text, pixels, kern):
    """Print the width of TEXT."""
    metrics = _load(metrics_file)
    try:
        click.echo(width(text, pixels, metrics, {"kern": kern}))
    except TextMetricsError as e:
        raise click.BadParameter(str(e))


@main.command(name="shorten")
@click.argument("metrics_file", type=METRICS_PATH)
@click.argument("text")
@click.argument("max_width", type=float)
@click.option("--pixels", "-p", type=float, default=None, help="Pixel size.")
@click.option("--kern", is_flag=True, help="Apply kerning.")
@click.option("--terminator", default=DEFAULT_TERMINATOR, show_default=True)
def shorten_command(metrics_file, text, max_width, pixels, kern, terminator):
    # pylint: disable=too-many-arguments, too-many-positional-arguments
    """Shorten TEXT to fit MAX_WIDTH."""
    metrics = _load(metrics_file)
    opts = {"kern": kern, "terminator": terminator}
    try:
        click.echo(shorten(text, max_width, pixels, metrics, opts))
    except TextMetricsError as e:
        raise click.BadParameter(str(e))


@main.command(name="wrap")
@click.argument("metrics_file", type=METRICS_PATH)
@click.argument("text")
@click.argument("max_width", type=float)
@click.option("--pixels", "-p", type=float, default=None, help="Pixel size.")
@click.option("--kern", is_flag=True, help="Apply kerning.")
@click.option(
    "--mode",
    type=click.Choice([m.value for m in WrapMode]),
    default=WrapMode.WORD.value,
    show_default=True,
)
def wrap_command(metrics_file, text, max_width, pixels, kern, mode):
    # pylint: disable=too-many-arguments, too-many-positional-arguments
    """Wrap TEXT to MAX_WIDTH."""
    metrics = _load(metrics_file)
    try:
        click.echo(wrap(text, max_width, pixels, metrics, {"kern": kern, "mode": mode}))
    except TextMetricsError as e:
        raise click.BadParameter(str(e))


if __name__ == "__main__":
    main()
