"""CLI module for mpvcut."""

import logging
from pathlib import Path

import click

from mpvcut.cli.exit_codes import ExitCode
from mpvcut.config import MpvcutConfig, get_config
from mpvcut.logging import configure_logging

logger = logging.getLogger(__name__)


def load_cli_config(ctx: click.Context, **overrides: Path | None) -> MpvcutConfig:
    """Load the effective configuration for a subcommand.

    Global logging options given to the group override the configured
    logging section, and logging is configured from the result.

    Args:
        ctx: Click context carrying the group options.
        **overrides: CLI overrides passed through to ``get_config``.

    Raises:
        click.exceptions.Exit: With CONFIG_ERROR if the configuration is invalid.
    """
    options = ctx.find_root().obj or {}
    try:
        config = get_config(config_path=options.get("config_path"), **overrides)
    except ValueError as e:
        click.echo(f"Error: Invalid configuration: {e}", err=True)
        ctx.exit(ExitCode.CONFIG_ERROR)

    if options.get("log_level"):
        config.logging.level = options["log_level"]
    if options.get("log_file"):
        config.logging.file = options["log_file"]
    if options.get("log_json"):
        config.logging.format = "json"
    configure_logging(config.logging)
    return config


@click.group()
@click.version_option(package_name="mpvcut")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Config file path (default: ~/.mpvcut/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """mpvcut - Cut clips and screenshots from a running mpv."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["log_level"] = log_level.lower() if log_level else None
    ctx.obj["log_file"] = log_file
    ctx.obj["log_json"] = log_json


# Defer import to avoid circular dependency
def _register_commands():
    from mpvcut.cli.bindings import bindings_command
    from mpvcut.cli.doctor import doctor_command
    from mpvcut.cli.run import run_command

    main.add_command(bindings_command)
    main.add_command(doctor_command)
    main.add_command(run_command)


_register_commands()
