"""
Video preview — two ffmpeg passes producing a palette-optimized GIF.

  1. palettegen: build a 256-colour palette from the preview window.
  2. paletteuse: render the same window, quantized against that palette.

The second pass reads the first pass's output, so they always run in order.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from thumbnailer.constants import PREVIEW_DURATION_SECS, PREVIEW_FPS, PREVIEW_OFFSET_SECS
from thumbnailer.process import ProcessResult, ProcessRunner


@dataclass(frozen=True)
class PreviewWindow:
    offset_secs: int = PREVIEW_OFFSET_SECS
    duration_secs: int = PREVIEW_DURATION_SECS


class VideoPreviewTransform:
    def __init__(
        self,
        runner: ProcessRunner,
        width: int,
        ffmpeg_binary: str = "ffmpeg",
        window: PreviewWindow = PreviewWindow(),
        fps: int = PREVIEW_FPS,
    ) -> None:
        self._runner = runner
        self.width = width
        self.ffmpeg_binary = ffmpeg_binary
        self.window = window
        self.fps = fps

    @property
    def _scale_filter(self) -> str:
        return f"fps={self.fps},scale={self.width}:-1:flags=lanczos"

    def _window_args(self) -> list[str]:
        return ["-ss", str(self.window.offset_secs), "-t", str(self.window.duration_secs)]

    def palette_args(self, source: Path, palette: Path) -> list[str]:
        return [
            self.ffmpeg_binary,
            "-y",
            *self._window_args(),
            "-i", str(source),
            "-vf", f"{self._scale_filter},palettegen",
            str(palette),
        ]

    def animation_args(self, source: Path, palette: Path, output: Path) -> list[str]:
        return [
            self.ffmpeg_binary,
            "-y",
            *self._window_args(),
            "-i", str(source),
            "-i", str(palette),
            "-filter_complex", f"{self._scale_filter}[x];[x][1:v]paletteuse",
            str(output),
        ]

    def generate_palette(self, source: Path, palette: Path) -> ProcessResult:
        return self._runner.run(self.palette_args(source, palette))

    def generate_animation(self, source: Path, palette: Path, output: Path) -> ProcessResult:
        return self._runner.run(self.animation_args(source, palette, output))
