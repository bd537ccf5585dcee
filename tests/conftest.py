"""Shared fixtures: an in-memory remote channel and capturing sink."""

import asyncio
from collections.abc import Callable
from typing import BinaryIO

import pytest

from puppet_provisioner.ui import CapturingSink


class FakeStream:
    """Line reader handing out queued lines, yielding to the loop each time."""

    def __init__(self, lines: list[str] | None = None) -> None:
        self._lines = list(lines or [])

    async def readline(self) -> str:
        await asyncio.sleep(0)
        if self._lines:
            return self._lines.pop(0)
        return ""

    @property
    def remaining(self) -> int:
        return len(self._lines)


class FakeProcess:
    """Remote process with scripted output and exit status.

    By default wait() returns on its first call, before the output
    streams have been read, so the runner must drain after the exit.
    Pass an asyncio.Event as ``release`` to hold the exit back.
    """

    def __init__(
        self,
        stdout: list[str] | None = None,
        stderr: list[str] | None = None,
        exit_status: int | None = 0,
        release: asyncio.Event | None = None,
    ) -> None:
        self.stdout = FakeStream(stdout)
        self.stderr = FakeStream(stderr)
        self.exit_status = exit_status
        self.release = release
        self.wait_calls = 0

    async def wait(self) -> int | None:
        self.wait_calls += 1
        if self.release is not None:
            await self.release.wait()
        return self.exit_status


class FakeChannel:
    """RemoteChannel recording commands and uploads in call order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []
        self.uploads: dict[str, bytes] = {}
        self.processes: dict[str, Callable[[], FakeProcess]] = {}
        self.start_error: Exception | None = None
        self.failing_commands: dict[str, int] = {}
        self.failing_uploads: set[str] = set()

    def on(self, prefix: str, factory: Callable[[], FakeProcess]) -> None:
        """Script the process returned for commands starting with prefix."""
        self.processes[prefix] = factory

    @property
    def commands(self) -> list[str]:
        return [arg for kind, arg in self.calls if kind == "start"]

    async def start(self, command: str) -> FakeProcess:
        self.calls.append(("start", command))
        if self.start_error is not None:
            raise self.start_error
        for prefix, status in self.failing_commands.items():
            if command.startswith(prefix):
                return FakeProcess(stderr=[f"{prefix}: failed\n"], exit_status=status)
        for prefix, factory in self.processes.items():
            if command.startswith(prefix):
                return factory()
        return FakeProcess()

    async def upload(self, remote_path: str, fileobj: BinaryIO) -> None:
        self.calls.append(("upload", remote_path))
        if any(remote_path.endswith(suffix) for suffix in self.failing_uploads):
            raise OSError(f"permission denied: {remote_path}")
        self.uploads[remote_path] = fileobj.read()


@pytest.fixture
def fake_channel() -> FakeChannel:
    """In-memory remote channel."""
    return FakeChannel()


@pytest.fixture
def make_process() -> type[FakeProcess]:
    """Factory for scripted remote processes."""
    return FakeProcess


@pytest.fixture
def sink() -> CapturingSink:
    """Sink recording every reported line."""
    return CapturingSink()
