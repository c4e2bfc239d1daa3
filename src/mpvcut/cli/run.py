"""mpvcut run command: attach to a running mpv and serve key bindings."""

import logging
from pathlib import Path

import click

from mpvcut.cli import load_cli_config
from mpvcut.cli.exit_codes import ExitCode
from mpvcut.exceptions import PlayerConnectionError
from mpvcut.player.ipc import MpvIpcClient
from mpvcut.session import Session

logger = logging.getLogger(__name__)


@click.command("run")
@click.option(
    "--socket",
    "socket_path",
    type=click.Path(path_type=Path),
    default=None,
    help="mpv IPC socket (default: /tmp/mpvsocket).",
)
@click.option(
    "--ffmpeg",
    "ffmpeg_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to the ffmpeg executable.",
)
@click.option(
    "--mpv",
    "mpv_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to the mpv executable used for rendering.",
)
@click.option(
    "--output-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Default output directory for cuts and screenshots.",
)
@click.pass_context
def run_command(
    ctx: click.Context,
    socket_path: Path | None,
    ffmpeg_path: Path | None,
    mpv_path: Path | None,
    output_dir: Path | None,
) -> None:
    """Attach to a running mpv and serve the cutting key bindings.

    mpv must be started with --input-ipc-server pointing at the socket.
    Runs until mpv quits.

    Exit codes:
      0 - mpv shut down normally
      31 - Could not connect to the mpv IPC socket
    """
    config = load_cli_config(
        ctx,
        socket_path=socket_path,
        ffmpeg_path=ffmpeg_path,
        mpv_path=mpv_path,
        output_dir=output_dir,
    )

    client = MpvIpcClient(config.ipc.socket, config.ipc.connect_timeout)
    try:
        client.connect()
    except PlayerConnectionError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(ExitCode.PLAYER_UNAVAILABLE)

    try:
        Session(client, config).serve()
    except KeyboardInterrupt:
        logger.info("Interrupted")
        ctx.exit(ExitCode.INTERRUPTED)
    finally:
        client.close()
