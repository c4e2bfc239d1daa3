"""Shared test fixtures for mpvcut."""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from mpvcut.config.models import ToolPathsConfig
from mpvcut.cutter.context import CutContext
from mpvcut.cutter.orchestrator import CutOrchestrator
from mpvcut.exceptions import PlayerCommandError


class FakePlayer:
    """In-memory stand-in for a running mpv.

    ``properties`` holds native values; ``get_property_string`` reads
    ``strings`` first and falls back to ``str()`` of the native value.
    Commands, property writes and OSD messages are recorded in order.
    """

    def __init__(
        self,
        properties: dict[str, Any] | None = None,
        strings: dict[str, str] | None = None,
    ) -> None:
        self.properties: dict[str, Any] = dict(properties or {})
        self.strings: dict[str, str] = dict(strings or {})
        self.commands: list[tuple[Any, ...]] = []
        self.set_calls: list[tuple[str, Any]] = []
        self.osd: list[tuple[str, float]] = []
        self.bound: list[tuple[str, str]] = []
        self.observed: list[tuple[int, str]] = []
        self.queued_events: list[dict[str, Any]] = []
        self.failing_commands: set[str] = set()
        self.on_command: dict[str, Any] = {}

    def get_property(self, name: str) -> Any:
        return self.properties.get(name)

    def get_property_string(self, name: str) -> str | None:
        if name in self.strings:
            return self.strings[name]
        value = self.properties.get(name)
        return None if value is None else str(value)

    def set_property(self, name: str, value: Any) -> None:
        self.set_calls.append((name, value))
        self.properties[name] = value

    def command(self, *args: Any) -> Any:
        self.commands.append(args)
        if args and args[0] in self.failing_commands:
            raise PlayerCommandError(list(args), "error running command")
        hook = self.on_command.get(args[0]) if args else None
        if hook is not None:
            hook(*args)
        return None

    def show_text(self, text: str, duration: float) -> None:
        self.osd.append((text, duration))

    def bind_key(self, key: str, message: str) -> None:
        self.bound.append((key, message))

    def observe_property(self, observe_id: int, name: str) -> None:
        self.observed.append((observe_id, name))

    def events(self) -> Iterator[dict[str, Any]]:
        yield from self.queued_events

    @property
    def messages(self) -> list[str]:
        """OSD texts only, in display order."""
        return [text for text, _ in self.osd]

    def has_message(self, fragment: str) -> bool:
        return any(fragment in text for text in self.messages)


@dataclass
class RecordingRunner:
    """Fake ``run_command`` that records commands and fakes their outputs.

    Successful runs create the file the command would have written: the
    ``--o=`` target for mpv and the last argument for everything else.
    ``results`` maps an executable name to ``(stderr, returncode)``.
    """

    results: dict[str, tuple[str, int]] = field(default_factory=dict)
    output_bytes: int = 1024
    calls: list[list[str]] = field(default_factory=list)
    inputs: list[bytes | None] = field(default_factory=list)

    def __call__(self, args: list, **kwargs: Any) -> tuple[str, str, int]:
        cmd = [str(arg) for arg in args]
        self.calls.append(cmd)
        self.inputs.append(kwargs.get("input_bytes"))

        program = Path(cmd[0]).name
        stderr, returncode = self.results.get(program, ("", 0))
        if returncode == 0:
            target = self._output_of(cmd)
            if target is not None and target.parent.is_dir():
                target.write_bytes(b"\0" * self.output_bytes)
        return "", stderr, returncode

    @staticmethod
    def _output_of(cmd: list[str]) -> Path | None:
        for arg in cmd:
            if arg.startswith("--o="):
                return Path(arg[len("--o=") :])
        if Path(cmd[0]).name in ("mpv", "ffmpeg"):
            return Path(cmd[-1])
        return None

    def calls_to(self, program: str) -> list[list[str]]:
        return [cmd for cmd in self.calls if Path(cmd[0]).name == program]


def fake_locator(available: tuple[str, ...] = ("ffmpeg", "mpv")):
    """Tool locator that finds only the named tools, under /usr/bin."""

    def locate(name: str, configured_path: Path | None = None) -> Path | None:
        if name not in available:
            return None
        return configured_path or Path("/usr/bin") / name

    return locate


@pytest.fixture
def player() -> FakePlayer:
    """Player with a local file loaded at 12.5 seconds."""
    return FakePlayer(
        properties={"time-pos": 12.5, "track-list": []},
        strings={"sid": "no", "aid": "1"},
    )


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def context(tmp_path: Path) -> CutContext:
    """Context writing to a temp default directory and temp dir."""
    temp_dir = tmp_path / "tmp"
    temp_dir.mkdir()
    return CutContext(
        default_directory=tmp_path / "cuts",
        temp_directory=temp_dir,
    )


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    """A local source video in its own directory."""
    videos = tmp_path / "videos"
    videos.mkdir()
    source = videos / "clip.mp4"
    source.write_bytes(b"\0")
    return source


@pytest.fixture
def make_player():
    """Factory for FakePlayer instances."""
    return FakePlayer


@pytest.fixture
def make_orchestrator(
    player: FakePlayer, context: CutContext, runner: RecordingRunner
):
    """Factory for orchestrators; ``available`` limits the tools found."""

    def factory(
        available: tuple[str, ...] = ("ffmpeg", "mpv"), **kwargs: Any
    ) -> CutOrchestrator:
        kwargs.setdefault("tools", ToolPathsConfig())
        return CutOrchestrator(
            kwargs.pop("player", player),
            kwargs.pop("context", context),
            runner=kwargs.pop("runner", runner),
            locate_tool=fake_locator(available),
            **kwargs,
        )

    return factory


@pytest.fixture
def orchestrator(make_orchestrator) -> CutOrchestrator:
    """Orchestrator wired to the fake player and runner."""
    return make_orchestrator()


@pytest.fixture
def locator():
    """Factory for tool locators that find only the named tools."""
    return fake_locator


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point MPVCUT_DATA_DIR at an empty temp dir and drop other MPVCUT_ vars.

    Keeps a developer's real ~/.mpvcut/config.toml out of every test.
    """
    for name in list(os.environ):
        if name.startswith("MPVCUT_"):
            monkeypatch.delenv(name)
    data_dir = tmp_path / ".mpvcut"
    monkeypatch.setenv("MPVCUT_DATA_DIR", str(data_dir))
    return data_dir
