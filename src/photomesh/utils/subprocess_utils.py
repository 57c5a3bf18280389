"""Safe subprocess runner for external tools (meshroom_compute, obj2gltf)."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
import threading
from pathlib import Path
from typing import IO, Optional

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


class OutputLimitExceeded(subprocess.SubprocessError):
    """Combined stdout/stderr grew past the capture bound; process was killed."""

    def __init__(self, cmd: str, limit: int, stdout: str = "", stderr: str = ""):
        self.cmd = cmd
        self.limit = limit
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(f"Command '{cmd}' exceeded output limit of {limit} bytes")


class _BoundedCapture:
    """Collects chunks from several pipes against one shared byte budget."""

    def __init__(self, limit: Optional[int]):
        self.limit = limit
        self.total = 0
        self.overflowed = False
        self._lock = threading.Lock()

    def add(self, sink: list[bytes], chunk: bytes) -> bool:
        with self._lock:
            self.total += len(chunk)
            if self.limit is not None and self.total > self.limit:
                self.overflowed = True
                return False
            sink.append(chunk)
            return True


def _kill_group(proc: subprocess.Popen) -> None:
    # The tool runs in its own session; take its children down with it.
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


def _drain(pipe: IO[bytes], sink: list[bytes], capture: _BoundedCapture, proc: subprocess.Popen) -> None:
    for chunk in iter(lambda: pipe.read(_CHUNK_SIZE), b""):
        if not capture.add(sink, chunk):
            _kill_group(proc)
            break
    pipe.close()


def _decode(chunks: list[bytes]) -> str:
    return b"".join(chunks).decode("utf-8", errors="replace")


def run_command(
    cmd: list[str],
    cwd: Path | None = None,
    timeout: float | None = 3600,
    max_output_bytes: int | None = None,
    check: bool = True,
) -> subprocess.CompletedProcess:
    """Run an external command with logging, a wall-clock timeout and bounded capture.

    Raises:
        subprocess.TimeoutExpired: the command ran past ``timeout`` and was killed.
        OutputLimitExceeded: stdout+stderr exceeded ``max_output_bytes``.
        subprocess.CalledProcessError: non-zero exit and ``check`` is set.
    """
    cmd_str = " ".join(cmd)
    logger.info(f"Running: {cmd_str}")

    proc = subprocess.Popen(
        cmd, cwd=cwd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, start_new_session=True
    )
    capture = _BoundedCapture(max_output_bytes)
    out_chunks: list[bytes] = []
    err_chunks: list[bytes] = []
    readers = [
        threading.Thread(target=_drain, args=(proc.stdout, out_chunks, capture, proc), daemon=True),
        threading.Thread(target=_drain, args=(proc.stderr, err_chunks, capture, proc), daemon=True),
    ]
    for reader in readers:
        reader.start()

    try:
        returncode = proc.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        _kill_group(proc)
        proc.wait()
        for reader in readers:
            reader.join(timeout=1)
        logger.error(f"Timed out after {timeout}s: {cmd_str}")
        raise subprocess.TimeoutExpired(
            cmd_str, timeout, output=_decode(out_chunks), stderr=_decode(err_chunks)
        )

    for reader in readers:
        reader.join(timeout=5)

    stdout = _decode(out_chunks)
    stderr = _decode(err_chunks)

    if capture.overflowed:
        logger.error(f"Output limit of {max_output_bytes} bytes exceeded: {cmd_str}")
        raise OutputLimitExceeded(cmd_str, max_output_bytes, stdout, stderr)

    if stdout:
        logger.debug(f"stdout: {stdout[-500:]}")
    if stderr:
        logger.debug(f"stderr: {stderr[-500:]}")

    if check and returncode != 0:
        raise subprocess.CalledProcessError(returncode, cmd_str, stdout, stderr)
    return subprocess.CompletedProcess(cmd, returncode, stdout, stderr)
