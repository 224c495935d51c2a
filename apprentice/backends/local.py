"""Local shell execution backend."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import BinaryIO

from apprentice.backends.base import BackendError, ExecResult, ExecutionBackend

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 4096


async def _drain(reader: asyncio.StreamReader, mirror: BinaryIO, buf: bytearray) -> None:
    """Copy *reader* into *mirror* as it arrives, keeping a copy in *buf*."""
    while True:
        chunk = await reader.read(_CHUNK_SIZE)
        if not chunk:
            return
        mirror.write(chunk)
        mirror.flush()
        buf.extend(chunk)


class LocalBackend(ExecutionBackend):
    """
    Runs commands through the platform shell on the local machine.

    stdout and stderr are drained concurrently; each is mirrored live to the
    terminal and captured, so the captured text is exactly what the user saw.
    stdin is inherited so interactive commands still work.

    Parameters
    ----------
    stdout, stderr:
        Binary streams to mirror output to.  Default to the process's own
        standard streams.
    """

    def __init__(
        self,
        stdout: BinaryIO | None = None,
        stderr: BinaryIO | None = None,
    ) -> None:
        self._stdout = stdout
        self._stderr = stderr

    async def execute(self, command: str) -> ExecResult:
        out_mirror = self._stdout or sys.stdout.buffer
        err_mirror = self._stderr or sys.stderr.buffer
        try:
            proc = await asyncio.create_subprocess_shell(
                command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise BackendError(
                f"Failed to run {command}\nError: {e}", code="spawn_failed"
            ) from e
        logger.debug("Spawned pid=%s: %s", proc.pid, command)

        out_buf = bytearray()
        err_buf = bytearray()
        assert proc.stdout is not None and proc.stderr is not None
        await asyncio.gather(
            _drain(proc.stdout, out_mirror, out_buf),
            _drain(proc.stderr, err_mirror, err_buf),
        )
        exit_code = await proc.wait()
        logger.debug("pid=%s exited with %s", proc.pid, exit_code)

        return ExecResult(
            stdout=out_buf.decode("utf-8", errors="replace"),
            stderr=err_buf.decode("utf-8", errors="replace"),
            exit_code=exit_code,
        )
