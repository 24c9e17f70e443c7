"""
cmdnest command-line entry point.

Everything after the global options is passed to the dispatcher untouched,
so commands and their arguments are never interpreted by click.
"""

from __future__ import annotations

import logging

import click
from pydantic import ValidationError

from . import __version__
from .aliases import AliasTable
from .dispatcher import Dispatcher
from .errors import ConfigError
from .logging_config import configure_logging
from .settings import AppSettings

logger = logging.getLogger(__name__)


def build_dispatcher(settings: AppSettings) -> Dispatcher:
    project = settings.project_config()
    context = settings.to_context(project)
    aliases = AliasTable.from_source(project)
    logger.debug(f"Root {context.root_dir}, search paths {[str(p) for p in context.search_paths]}")
    return Dispatcher(context, aliases)


@click.command(
    context_settings={
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
        "help_option_names": [],
    }
)
@click.version_option(version=__version__, prog_name="cmdnest")
@click.option("--log-level", default=None, help="Log level (override env)")
@click.option("--log-format", default=None, type=click.Choice(["json", "text"]))
@click.argument("argv", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def main(ctx, log_level, log_format, argv) -> None:
    """Run a command from the project's command tree."""
    try:
        settings = AppSettings()
    except ValidationError as e:
        raise ConfigError(str(e)) from e

    configure_logging(log_level or settings.log_level, log_format or settings.log_format)
    dispatcher = build_dispatcher(settings)
    ctx.exit(dispatcher.dispatch(list(argv)))


if __name__ == "__main__":
    main()
