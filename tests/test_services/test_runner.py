"""Tests for remote command execution and output streaming."""

import asyncio
from typing import Any
from unittest.mock import AsyncMock

import pytest

from puppet_provisioner.errors import (
    RemoteExecutionError,
    RemoteStartError,
    TransferError,
)
from puppet_provisioner.services.runner import (
    UNKNOWN_EXIT_STATUS,
    create_remote_directory,
    drain_lines,
    run_command,
)
from puppet_provisioner.ui import CapturingSink


class TestDrainLines:
    """Test single-stream draining."""

    @pytest.mark.asyncio
    async def test_strips_trailing_whitespace(self, make_process: Any, sink: Any) -> None:
        """Lines are forwarded without trailing newline or spaces."""
        process = make_process(stdout=["first  \n", "  indented\r\n", "last"])

        count = await drain_lines(process.stdout, sink, "stdout")

        assert count == 3
        assert sink.messages == ["first", "  indented", "last"]

    @pytest.mark.asyncio
    async def test_decodes_bytes(self, sink: Any) -> None:
        """Byte lines are decoded as UTF-8 with replacement."""
        reader = AsyncMock()
        reader.readline = AsyncMock(side_effect=[b"caf\xc3\xa9\n", b"\xff\n", b""])

        await drain_lines(reader, sink, "stdout")

        assert sink.messages == ["café", "�"]

    @pytest.mark.asyncio
    async def test_missing_stream_is_empty(self, sink: Any) -> None:
        """An unattached stream forwards nothing."""
        assert await drain_lines(None, sink, "stderr") == 0
        assert sink.events == []

    @pytest.mark.asyncio
    async def test_failing_sink_does_not_stop_drain(self, make_process: Any) -> None:
        """A sink error on one line still lets later lines through."""
        delivered: list[str] = []

        class FlakySink(CapturingSink):
            def message(self, line: str) -> None:
                if line == "bad":
                    raise RuntimeError("display closed")
                delivered.append(line)

        process = make_process(stdout=["one\n", "bad\n", "two\n"])

        count = await drain_lines(process.stdout, FlakySink(), "stdout")

        assert count == 3
        assert delivered == ["one", "two"]


class TestRunCommand:
    """Test run_command result mapping and streaming."""

    @pytest.mark.asyncio
    async def test_success_returns_completed_command(
        self, fake_channel: Any, sink: Any
    ) -> None:
        """Exit status 0 returns the completed command."""
        result = await run_command(fake_channel, "true", sink)

        assert result.command == "true"
        assert result.exit_status == 0
        assert result.succeeded
        assert fake_channel.commands == ["true"]

    @pytest.mark.asyncio
    async def test_delivers_all_lines_in_stream_order(
        self, fake_channel: Any, make_process: Any, sink: Any
    ) -> None:
        """Every line of both streams reaches the sink, each stream in order."""
        fake_channel.on(
            "puppet",
            lambda: make_process(
                stdout=["out 1\n", "out 2\n", "out 3\n"],
                stderr=["err 1\n", "err 2\n"],
            ),
        )

        await run_command(fake_channel, "puppet apply", sink)

        messages = sink.messages
        assert sorted(messages) == sorted(
            ["out 1", "out 2", "out 3", "err 1", "err 2"]
        )
        assert [m for m in messages if m.startswith("out")] == [
            "out 1",
            "out 2",
            "out 3",
        ]
        assert [m for m in messages if m.startswith("err")] == ["err 1", "err 2"]

    @pytest.mark.asyncio
    async def test_output_after_exit_signal_is_flushed(
        self, fake_channel: Any, make_process: Any, sink: Any
    ) -> None:
        """Exit reported before the streams are read still delivers everything."""
        process = make_process(
            stdout=[f"line {i}\n" for i in range(50)],
            stderr=["final warning\n"],
        )
        fake_channel.on("noisy", lambda: process)

        await run_command(fake_channel, "noisy", sink)

        assert process.wait_calls == 1
        assert process.stdout.remaining == 0
        assert process.stderr.remaining == 0
        assert sink.messages.count("final warning") == 1
        assert [m for m in sink.messages if m.startswith("line")] == [
            f"line {i}" for i in range(50)
        ]

    @pytest.mark.asyncio
    async def test_output_streams_before_exit(
        self, fake_channel: Any, make_process: Any, sink: Any
    ) -> None:
        """Lines reach the sink while the remote command is still running."""
        release = asyncio.Event()
        fake_channel.on(
            "long",
            lambda: make_process(stdout=["working\n"], release=release),
        )

        task = asyncio.create_task(run_command(fake_channel, "long", sink))
        for _ in range(10):
            await asyncio.sleep(0)

        assert sink.messages == ["working"]
        assert not task.done()

        release.set()
        result = await task
        assert result.exit_status == 0

    @pytest.mark.asyncio
    async def test_nonzero_exit_raises_with_status(
        self, fake_channel: Any, make_process: Any, sink: Any
    ) -> None:
        """Non-zero exit raises RemoteExecutionError after delivering output."""
        fake_channel.on(
            "gem",
            lambda: make_process(
                stdout=["Fetching puppet\n"],
                stderr=["ERROR: could not find gem\n"],
                exit_status=2,
            ),
        )

        with pytest.raises(RemoteExecutionError) as exc_info:
            await run_command(fake_channel, "gem install puppet", sink)

        assert exc_info.value.exit_status == 2
        assert exc_info.value.command == "gem install puppet"
        assert "2" in str(exc_info.value)
        assert set(sink.messages) == {"Fetching puppet", "ERROR: could not find gem"}

    @pytest.mark.asyncio
    async def test_missing_exit_status_is_failure(
        self, fake_channel: Any, make_process: Any, sink: Any
    ) -> None:
        """A process that never reports a status counts as failed."""
        fake_channel.on("vanish", lambda: make_process(exit_status=None))

        with pytest.raises(RemoteExecutionError) as exc_info:
            await run_command(fake_channel, "vanish", sink)

        assert exc_info.value.exit_status == UNKNOWN_EXIT_STATUS

    @pytest.mark.asyncio
    async def test_start_failure_raises_start_error(
        self, fake_channel: Any, sink: Any
    ) -> None:
        """A channel that cannot start the command raises RemoteStartError."""
        cause = ConnectionResetError("channel closed")
        fake_channel.start_error = cause

        with pytest.raises(RemoteStartError) as exc_info:
            await run_command(fake_channel, "true", sink)

        assert exc_info.value.original_error is cause
        assert exc_info.value.__cause__ is cause
        assert fake_channel.commands == ["true"]

    @pytest.mark.asyncio
    async def test_start_failure_not_retried(self, sink: Any) -> None:
        """The channel is asked to start the command exactly once."""
        channel = AsyncMock()
        channel.start = AsyncMock(side_effect=OSError("boom"))

        with pytest.raises(RemoteStartError):
            await run_command(channel, "true", sink)

        channel.start.assert_called_once_with("true")

    @pytest.mark.asyncio
    async def test_wait_failure_raises_execution_error(
        self, make_process: Any, sink: Any
    ) -> None:
        """Losing the process while waiting is reported as an execution failure."""
        process = make_process(stdout=["partial\n"])
        process.wait = AsyncMock(side_effect=EOFError("connection lost"))
        channel = AsyncMock()
        channel.start = AsyncMock(return_value=process)

        with pytest.raises(RemoteExecutionError) as exc_info:
            await run_command(channel, "puppet apply", sink)

        assert exc_info.value.exit_status == UNKNOWN_EXIT_STATUS
        assert isinstance(exc_info.value.__cause__, EOFError)

    @pytest.mark.asyncio
    async def test_stream_failure_raises_execution_error(
        self, make_process: Any, sink: Any
    ) -> None:
        """A broken output stream fails the command and stops the other drain."""
        never = asyncio.Event()

        class StalledStream:
            async def readline(self) -> str:
                await never.wait()
                return ""

        process = make_process()
        process.stdout = AsyncMock()
        process.stdout.readline = AsyncMock(side_effect=ConnectionResetError("reset"))
        process.stderr = StalledStream()
        channel = AsyncMock()
        channel.start = AsyncMock(return_value=process)

        with pytest.raises(RemoteExecutionError) as exc_info:
            await run_command(channel, "puppet apply", sink)

        assert exc_info.value.exit_status == UNKNOWN_EXIT_STATUS
        assert isinstance(exc_info.value.__cause__, ConnectionResetError)
        leftover = [t for t in asyncio.all_tasks() if t is not asyncio.current_task()]
        assert leftover == []

    @pytest.mark.asyncio
    async def test_stream_failure_after_partial_output(
        self, make_process: Any, sink: Any
    ) -> None:
        """Lines read before a stream breaks are still delivered."""
        reader = AsyncMock()
        reader.readline = AsyncMock(side_effect=["Notice: applying\n", EOFError()])
        process = make_process(stderr=["warning\n"])
        process.stdout = reader
        channel = AsyncMock()
        channel.start = AsyncMock(return_value=process)

        with pytest.raises(RemoteExecutionError):
            await run_command(channel, "puppet apply", sink)

        assert "Notice: applying" in sink.messages

    @pytest.mark.asyncio
    async def test_lines_and_status_logged(
        self,
        fake_channel: Any,
        make_process: Any,
        sink: Any,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Streamed lines and the exit status go to the diagnostic log."""
        fake_channel.on("echo", lambda: make_process(stdout=["hello\n"]))

        with caplog.at_level("DEBUG", logger="puppet_provisioner"):
            await run_command(fake_channel, "echo hello", sink)

        assert "[stdout] hello" in caplog.text
        assert "exited with status 0" in caplog.text


class TestCreateRemoteDirectory:
    """Test remote mkdir helper."""

    @pytest.mark.asyncio
    async def test_runs_mkdir_with_parents(self, fake_channel: Any, sink: Any) -> None:
        """Uses mkdir -p with a quoted path."""
        await create_remote_directory(fake_channel, "/tmp/provision/my modules", sink)

        assert fake_channel.commands == ["mkdir -p '/tmp/provision/my modules'"]

    @pytest.mark.asyncio
    async def test_failure_raises_transfer_error(
        self, fake_channel: Any, sink: Any
    ) -> None:
        """A failing mkdir is a TransferError naming the directory."""
        fake_channel.failing_commands["mkdir"] = 1

        with pytest.raises(TransferError) as exc_info:
            await create_remote_directory(fake_channel, "/tmp/provision/puppet", sink)

        assert exc_info.value.path == "/tmp/provision/puppet"
        assert isinstance(exc_info.value.original_error, RemoteExecutionError)

    @pytest.mark.asyncio
    async def test_start_failure_raises_transfer_error(
        self, fake_channel: Any, sink: Any
    ) -> None:
        """A channel start failure is also reported against the path."""
        fake_channel.start_error = OSError("no session")

        with pytest.raises(TransferError) as exc_info:
            await create_remote_directory(fake_channel, "/srv", sink)

        assert isinstance(exc_info.value.original_error, RemoteStartError)
