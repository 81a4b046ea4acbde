"""Process backend — runs an external program from an argv list, no shell involved."""
import asyncio
import logging
import os
import time
from typing import Sequence, Tuple

from .base import ProcessInvocation, InvocationResult, TIMEOUT

logger = logging.getLogger(__name__)

_CHUNK = 64 * 1024


async def _drain(stream: asyncio.StreamReader, limit: int) -> Tuple[bytes, bool]:
    """Read a pipe to EOF, keeping at most ``limit`` bytes.

    The rest is read and discarded so a chatty child never blocks on a full pipe.
    """
    buf = bytearray()
    truncated = False
    while True:
        chunk = await stream.read(_CHUNK)
        if not chunk:
            break
        room = limit - len(buf)
        if room >= len(chunk):
            buf.extend(chunk)
        else:
            if room > 0:
                buf.extend(chunk[:room])
            truncated = True
    return bytes(buf), truncated


def _kill(proc: asyncio.subprocess.Process):
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass


def _stderr_is_diagnostic(stderr: str, allow_prefixes: Sequence[str]) -> bool:
    """True if stderr holds any line that is not whitelisted informational output."""
    for line in stderr.splitlines():
        line = line.strip()
        if not line:
            continue
        if not any(line.startswith(p) for p in allow_prefixes):
            return True
    return False


class ProcessBackend:
    def __init__(self, stderr_allow_prefixes: Sequence[str] = ("INF",)):
        self.stderr_allow_prefixes = tuple(stderr_allow_prefixes)

    async def run(self, invocation: ProcessInvocation) -> InvocationResult:
        program = invocation.program
        env = {**os.environ, **invocation.env} if invocation.env else None

        try:
            proc = await asyncio.create_subprocess_exec(
                program, *invocation.arguments,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=env,
                cwd=invocation.cwd,
            )
        except OSError as e:
            # Missing binary, permission denied, bad cwd
            logger.error(f"Process: failed to start {program}: {e}")
            return InvocationResult.failed(f"failed to start {program}: {e}")

        t0 = time.monotonic()
        limit = invocation.max_output_bytes
        try:
            (stdout, out_truncated), (stderr, _), returncode = await asyncio.wait_for(
                asyncio.gather(
                    _drain(proc.stdout, limit),
                    _drain(proc.stderr, limit),
                    proc.wait(),
                ),
                timeout=invocation.timeout_ms / 1000,
            )
        except asyncio.TimeoutError:
            _kill(proc)
            await proc.wait()
            logger.warning(f"Process: {program} killed after {invocation.timeout_ms}ms")
            return InvocationResult.failed(TIMEOUT)
        except asyncio.CancelledError:
            _kill(proc)
            await asyncio.shield(proc.wait())
            raise

        elapsed = time.monotonic() - t0
        out = stdout.decode(errors="replace")
        err = stderr.decode(errors="replace")
        if out_truncated:
            logger.warning(f"Process: {program} output truncated at {limit} bytes")
            out += f"\n[output truncated at {limit} bytes]"

        if returncode != 0:
            logger.info(f"Process: {program} exited {returncode} in {elapsed:.1f}s")
            return InvocationResult.failed(err.strip() or f"exit code {returncode}")

        if _stderr_is_diagnostic(err, self.stderr_allow_prefixes):
            logger.info(f"Process: {program} wrote diagnostics to stderr")
            return InvocationResult.failed(err)

        logger.debug(f"Process: {program} ok in {elapsed:.1f}s ({len(stdout)} bytes)")
        return InvocationResult.ok(out)

