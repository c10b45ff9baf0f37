"""Asynchronous subprocess execution shared by the git and build collaborators."""

from __future__ import annotations

import asyncio
import logging
import shlex
from collections import deque
from collections.abc import AsyncIterator, Sequence
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from binsmith.sourcing.status import Status

logger = logging.getLogger(__name__)

# Lines of output shown in error messages, and kept per command.
TAIL_LINES = 20
KEPT_LINES = 500
CHUNK_SIZE = 64 * 1024


class CommandResult(BaseModel):
    """Outcome of a finished subprocess."""

    model_config = ConfigDict(frozen=True)

    args: list[str]
    returncode: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def tail(self, lines: int = TAIL_LINES) -> str:
        return "\n".join(self.output.splitlines()[-lines:])


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace").rstrip()


async def _read_lines(stream: asyncio.StreamReader) -> AsyncIterator[str]:
    # Lines may be longer than the StreamReader line limit.
    pending = bytearray()
    while True:
        chunk = await stream.read(CHUNK_SIZE)
        if not chunk:
            break
        pending.extend(chunk)
        *complete, rest = pending.split(b"\n")
        for raw in complete:
            yield _decode(raw)
        pending = bytearray(rest)
    if pending:
        yield _decode(bytes(pending))


async def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    status: Status | None = None,
    verbose: bool = False,
) -> CommandResult:
    """Run ``args`` to completion, capturing combined stdout and stderr.

    With ``verbose`` set, each output line is also forwarded to ``status``
    as it arrives.  Only the last ``KEPT_LINES`` lines are kept in the
    result.  The child is killed if reading its output fails or the
    caller is cancelled.

    Raises
    ------
    FileNotFoundError
        If the executable does not exist.
    """
    command = [str(a) for a in args]
    logger.debug("Running %s (cwd=%s)", shlex.join(command), cwd)
    process = await asyncio.create_subprocess_exec(
        *command,
        cwd=cwd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
    )
    assert process.stdout is not None

    lines: deque[str] = deque(maxlen=KEPT_LINES)
    try:
        async for line in _read_lines(process.stdout):
            lines.append(line)
            if verbose and status is not None:
                status.update(line)
        returncode = await process.wait()
    finally:
        if process.returncode is None:
            process.kill()
            await process.wait()

    logger.debug("%s exited with %d", command[0], returncode)
    return CommandResult(args=command, returncode=returncode, output="\n".join(lines))
