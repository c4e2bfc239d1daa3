"""mpvcut bindings command: print an input.conf snippet."""

import click

from mpvcut.bindings import build_bindings, input_conf_snippet
from mpvcut.cli import load_cli_config


@click.command("bindings")
@click.pass_context
def bindings_command(ctx: click.Context) -> None:
    """Print key bindings in input.conf format.

    Useful for binding the actions from mpv's own input.conf instead of
    letting 'mpvcut run' register them.
    """
    config = load_cli_config(ctx)
    click.echo(input_conf_snippet(build_bindings(config.clipboard.key)), nl=False)
