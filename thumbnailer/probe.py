"""
Reads a media file's duration with ffprobe.

Never raises: any failure degrades the duration to 0.
"""
from __future__ import annotations

import json
import logging
import math
from pathlib import Path

from thumbnailer.process import ProcessRunner

logger = logging.getLogger(__name__)


class DurationProbe:
    def __init__(self, runner: ProcessRunner, ffprobe_binary: str = "ffprobe") -> None:
        self._runner = runner
        self._binary = ffprobe_binary

    def probe_args(self, path: Path) -> list[str]:
        return [
            self._binary,
            "-v", "quiet",
            "-print_format", "json",
            "-show_format",
            str(path),
        ]

    def probe(self, path: Path) -> int:
        """Return the duration of *path* in whole seconds (truncated), or 0."""
        result = self._runner.run(self.probe_args(path))
        if not result.ok:
            logger.warning("ffprobe failed for %s; using duration 0", path.name)
            return 0
        return parse_duration(result.stdout)


def parse_duration(payload: str) -> int:
    """Extract ``format.duration`` from ffprobe JSON output."""
    try:
        raw = json.loads(payload)["format"]["duration"]
        seconds = float(raw)
    except (ValueError, TypeError, KeyError) as exc:
        logger.warning("Could not parse duration from ffprobe output: %s", exc)
        return 0

    if not math.isfinite(seconds) or seconds < 0:
        logger.warning("Ignoring out-of-range duration %r", raw)
        return 0
    return int(seconds)
