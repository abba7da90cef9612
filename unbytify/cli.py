from __future__ import annotations

from pathlib import Path

import click

from unbytify.config_loader import load_config
from unbytify.logging_setup import category_context, correlation_context, get_logger, setup_logging
from unbytify.size_format import DEFAULT_PRECISION, render_size
from unbytify.size_parser import SizeParseError, parse_size
from unbytify.units import U64_MAX

LOGGER = get_logger(__name__)


@click.group()
def main() -> None:
    """unbytify commands."""
    setup_logging()
    LOGGER.debug("CLI bootstrap completed")


@main.command()
@click.argument("values", nargs=-1, required=True)
def parse(values: tuple[str, ...]) -> None:
    """Print the byte count of each human-readable size."""
    with correlation_context(), category_context("PARSE"):
        LOGGER.info("CLI parse command values=%s", list(values))
        for value in values:
            try:
                click.echo(parse_size(value))
            except SizeParseError as exc:
                LOGGER.warning("Parse failed value=%r kind=%s", value, exc.kind.value, extra={"category": "ERRORS"})
                raise click.ClickException(str(exc)) from exc


@main.command("format")
@click.argument("values", nargs=-1, required=True, type=click.IntRange(0, U64_MAX))
@click.option("--precision", type=click.IntRange(0, 3), default=DEFAULT_PRECISION, show_default=True)
def format_sizes(values: tuple[int, ...], precision: int) -> None:
    """Print each byte count as a human-readable size."""
    with correlation_context(), category_context("FORMAT"):
        LOGGER.info("CLI format command values=%s precision=%s", list(values), precision)
        for value in values:
            click.echo(render_size(value, precision))


@main.command("check-config")
@click.argument("config_path", type=click.Path(path_type=Path))
def check_config(config_path: Path) -> None:
    """Validate a YAML limits file and print every limit in bytes."""
    with correlation_context(), category_context("CONFIG"):
        LOGGER.info("CLI check-config command path=%s", config_path)
        try:
            cfg = load_config(config_path)
        except ValueError as exc:
            raise click.ClickException(str(exc)) from exc
        for name, size in cfg.limits.items():
            click.echo(f"{name} = {size} ({render_size(size, cfg.settings.precision)})")


if __name__ == "__main__":
    main()
