"""Event loop tying a player connection to the cutting actions.

A session binds every action's chord, observes the loaded file and then
dispatches events until the player shuts down. All actions run on the
thread that reads events.
"""

import logging
from functools import partial
from typing import Any

from mpvcut.bindings import ActionDispatcher, Handler, KeyBinding, build_bindings
from mpvcut.clipboard.capture import ClipboardCapture
from mpvcut.config.models import MpvcutConfig
from mpvcut.core.subprocess_utils import CommandRunner, run_command
from mpvcut.cutter.context import CutContext
from mpvcut.cutter.orchestrator import CutOrchestrator, ToolLocator
from mpvcut.domain.enums import QualityTier
from mpvcut.player.interface import PlayerSession
from mpvcut.player.osd import StatusReporter
from mpvcut.tools.detection import find_tool

logger = logging.getLogger(__name__)

PATH_OBSERVER_ID = 1


def build_handlers(
    orchestrator: CutOrchestrator, clipboard: ClipboardCapture
) -> dict[str, Handler]:
    """Map action names to the callables that implement them."""
    handlers: dict[str, Handler] = {
        "set_start_time": orchestrator.mark_start,
        "set_end_time": orchestrator.mark_end,
        "cut_video": orchestrator.cut,
        "take_screenshots": orchestrator.take_screenshots,
        "toggle_output_dir": orchestrator.toggle_output_location,
        "toggle_output_format": orchestrator.toggle_output_format,
        "show_help": orchestrator.show_help,
        "clipboard_screenshot": clipboard.capture,
    }
    for tier in QualityTier:
        handlers[f"set_quality_{tier.value}"] = partial(orchestrator.set_quality, tier)
    return handlers


class Session:
    """One attachment of mpvcut to a running player.

    Args:
        player: Connected player.
        config: Effective configuration.
        runner: Subprocess runner for every external tool.
        locate_tool: Tool lookup, ``(name, configured_path) -> path``.
    """

    def __init__(
        self,
        player: PlayerSession,
        config: MpvcutConfig,
        runner: CommandRunner = run_command,
        locate_tool: ToolLocator = find_tool,
    ) -> None:
        self.player = player
        self.config = config
        self.bindings: tuple[KeyBinding, ...] = build_bindings(config.clipboard.key)
        self.reporter = StatusReporter(player)
        self.context = CutContext.from_config(config.output)
        self.orchestrator = CutOrchestrator(
            player,
            self.context,
            tools=config.tools,
            reporter=self.reporter,
            runner=runner,
            locate_tool=locate_tool,
            bindings=self.bindings,
        )
        self.clipboard = ClipboardCapture(
            player,
            self.reporter,
            config.clipboard,
            ffmpeg_path=locate_tool("ffmpeg", config.tools.ffmpeg),
            temp_directory=self.context.temp_directory,
            runner=runner,
        )
        self.dispatcher = ActionDispatcher(
            build_handlers(self.orchestrator, self.clipboard), self.reporter
        )

    def register(self) -> None:
        """Bind the action chords and start observing the loaded file."""
        for binding in self.bindings:
            if binding.chord:
                self.player.bind_key(binding.chord, binding.message)
                logger.debug("Bound %s to %s", binding.chord, binding.action)
        self.player.observe_property(PATH_OBSERVER_ID, "path")

    def handle_event(self, event: dict[str, Any]) -> None:
        """Handle one player event."""
        kind = event.get("event")
        if kind == "client-message":
            args = event.get("args") or []
            if args:
                self.dispatcher.dispatch(str(args[0]))
        elif kind == "property-change" and event.get("name") == "path":
            data = event.get("data")
            self.orchestrator.on_path_changed(data if isinstance(data, str) else None)

    def serve(self) -> None:
        """Register with the player and handle events until it shuts down."""
        self.register()
        logger.info("Serving %d actions", len(self.dispatcher.handlers))
        for event in self.player.events():
            self.handle_event(event)
        logger.info("Player session ended")
