"""
Runs external tools (ffmpeg, ffprobe) and captures their output.

Spawn failures and timeouts are reported as a failed ProcessResult rather
than raised, so every caller handles one result type.
"""
from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Return code used when the process never produced an exit status
SPAWN_FAILED = -1


@dataclass(frozen=True)
class ProcessResult:
    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def program(self) -> str:
        return Path(self.args[0]).name if self.args else "<none>"

    @property
    def output(self) -> str:
        """Combined stdout and stderr, for diagnostics."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


class ProcessRunner:
    """Runs external programs in a fixed working directory."""

    def __init__(self, cwd: Path | None = None, timeout: float | None = None) -> None:
        self._cwd = cwd
        self._timeout = timeout

    def run(self, args: Sequence[str]) -> ProcessResult:
        argv = tuple(str(a) for a in args)
        logger.info("Executing: %s", " ".join(argv))
        try:
            completed = subprocess.run(
                argv,
                cwd=self._cwd,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as exc:
            logger.error("%s timed out after %ss", argv[0], self._timeout)
            return ProcessResult(
                args=argv,
                returncode=SPAWN_FAILED,
                stdout=_decode(exc.stdout),
                stderr=_decode(exc.stderr) or f"Timed out after {self._timeout}s",
            )
        except OSError as exc:
            logger.error("Could not start %s: %s", argv[0], exc)
            return ProcessResult(args=argv, returncode=SPAWN_FAILED, stderr=str(exc))

        result = ProcessResult(
            args=argv,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        if not result.ok:
            logger.error(
                "%s exited with status %d. Output: %s",
                result.program, result.returncode, result.output,
            )
        return result


def _decode(data: bytes | str | None) -> str:
    # TimeoutExpired carries bytes even when text=True was requested
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
