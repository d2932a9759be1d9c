"""
Font Registry CLI
=================

Command line access to the font registry: load, list, check, install and get
font variants.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click

from fontsdb.core.config import FontsDbConfig
from fontsdb.core.exceptions import FontError, FontsDbError
from fontsdb.fonts.registry import FontsDb

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@contextmanager
def open_registry(config: FontsDbConfig, prefetch: bool = False) -> Iterator[FontsDb]:
    """Load the registry and save it when leaving the block."""
    config.fonts_path.mkdir(parents=True, exist_ok=True)
    with FontsDb.from_config(config) as db:
        db.load(prefetch=prefetch)
        yield db


def query_options(func):
    """Options shared by the commands taking a font query."""
    func = click.option(
        "--subset",
        "subsets",
        multiple=True,
        help="Required subset (repeatable), e.g. latin, cyrillic",
    )(func)
    func = click.option("--style", "-s", default=None, help="Font style (normal, italic)")(func)
    func = click.option("--weight", "-w", default=None, help="Font weight (700, bold, 300italic)")(
        func
    )
    return click.argument("query")(func)


def _run(ctx: click.Context, action):
    """Run an action on the loaded registry, exiting with 1 on failure."""
    config: FontsDbConfig = ctx.obj["config"]
    try:
        with open_registry(config, ctx.obj["prefetch"]) as db:
            return action(db)
    except FontError as e:
        click.echo(e.font_error(), err=True)
        sys.exit(1)
    except FontsDbError as e:
        logger.error(f"{e}")
        sys.exit(1)


@click.group()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to configuration YAML file",
)
@click.option(
    "--fonts-path",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Registry root directory",
)
@click.option("--prefetch", is_flag=True, help="Merge the provider catalogs on load")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx, config_path, fonts_path, prefetch, verbose):
    """Font registry CLI."""
    try:
        config = FontsDbConfig.from_env_and_yaml(yaml_path=config_path)
    except FontsDbError as e:
        logger.error(f"{e}")
        sys.exit(1)

    if fonts_path:
        config = config.model_copy(update={"fonts_path": fonts_path})

    logging.getLogger().setLevel(logging.DEBUG if verbose else config.log_level)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["prefetch"] = prefetch


@cli.command()
@click.pass_context
def load(ctx):
    """Load the registry and print a summary."""

    def action(db: FontsDb):
        installed = [font for font in db.fonts.values() if font.installed]
        click.echo(f"Fonts path: {db.fonts_path}")
        click.echo(f"Known fonts: {len(db.fonts)}")
        click.echo(f"Installed fonts: {len(installed)}")
        if db.distant_loaded:
            click.echo(f"Providers: {', '.join(p.name for p in db.providers)}")

    _run(ctx, action)


@cli.command(name="list")
@click.option("--installed", "installed_only", is_flag=True, help="Only list installed fonts")
@click.pass_context
def list_fonts(ctx, installed_only):
    """List fonts, installed variants are marked with *."""

    def action(db: FontsDb):
        for font_id in sorted(db.fonts):
            font = db.fonts[font_id]
            if installed_only and not font.installed:
                continue
            installed = set(font.installed_variants)
            variants = [f"{vid}*" if vid in installed else vid for vid in font.variants]
            click.echo(f"{font.id}\t{font.family}\t{', '.join(variants)}")

    _run(ctx, action)


@cli.command()
@query_options
@click.pass_context
def check(ctx, query, weight, style, subsets):
    """Check a font variant is installed."""

    def action(db: FontsDb):
        db.check(query, weight, style, list(subsets) or None)
        click.echo("OK")

    _run(ctx, action)


@cli.command()
@query_options
@click.pass_context
def install(ctx, query, weight, style, subsets):
    """Install a font variant from the providers."""

    def action(db: FontsDb):
        db.install(query, weight, style, list(subsets) or None)
        click.echo("OK")

    _run(ctx, action)


@cli.command()
@query_options
@click.pass_context
def get(ctx, query, weight, style, subsets):
    """Print an installed font variant as JSON."""

    def action(db: FontsDb):
        return db.get(query, weight, style, list(subsets) or None)

    face = _run(ctx, action)
    if face is None:
        click.echo(f"Font not installed: {query}", err=True)
        sys.exit(1)
    click.echo(face.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
