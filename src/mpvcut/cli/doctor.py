"""mpvcut doctor command for checking external tool health."""

import json

import click

from mpvcut.cli import load_cli_config
from mpvcut.cli.exit_codes import ExitCode
from mpvcut.clipboard.backends import select_backend
from mpvcut.exceptions import ToolNotFoundError
from mpvcut.tools.detection import INSTALL_HINTS, ToolInfo, detect_tool


def _format_status(available: bool) -> str:
    """Format status for display."""
    return "✓" if available else "✗"


def _format_version(info: ToolInfo) -> str:
    if not info.available:
        return "not found"
    return info.version or "unknown version"


@click.command("doctor")
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output results as JSON",
)
@click.pass_context
def doctor_command(ctx: click.Context, json_output: bool) -> None:
    """Check external tool availability.

    Reports ffmpeg (every cut), mpv (re-encoded cuts) and the clipboard
    backend (clipboard screenshots).

    Exit codes:
      0 - ffmpeg and mpv available
      30 - ffmpeg or mpv missing
    """
    config = load_cli_config(ctx)

    tools = [
        detect_tool("ffmpeg", config.tools.ffmpeg),
        detect_tool("mpv", config.tools.mpv),
    ]
    try:
        clipboard: str | None = select_backend(config.clipboard.backend).name
    except ToolNotFoundError:
        clipboard = None

    missing = [info for info in tools if not info.available]

    if json_output:
        payload = {
            "tools": {
                info.name: {
                    "available": info.available,
                    "path": str(info.path) if info.path else None,
                    "version": info.version,
                }
                for info in tools
            },
            "clipboard": clipboard,
        }
        click.echo(json.dumps(payload, indent=2))
    else:
        click.echo("mpvcut External Tool Health Check")
        click.echo("=" * 40)
        for info in tools:
            path_info = f" ({info.path})" if info.path else ""
            click.echo(
                f"  {_format_status(info.available)} {info.name}: "
                f"{_format_version(info)}{path_info}"
            )
            if not info.available:
                click.echo(f"    └─ {INSTALL_HINTS[info.name]}")
        click.echo(
            f"  {_format_status(clipboard is not None)} clipboard: "
            f"{clipboard or 'no backend found (optional)'}"
        )

    if missing:
        ctx.exit(ExitCode.TOOL_NOT_AVAILABLE)
