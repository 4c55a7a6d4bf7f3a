"""
Thumbnail pipeline — drives one Job from source object to derived artifact.

Video:
  download → palette → animation → probe → report → drop source/palette
  → upload GIF → drop GIF
Image:
  fetch → resize → upload

The first fatal error stops the remaining transform/upload stages and becomes
the Failure outcome. Probe and report problems are never fatal. Scratch
files are removed on every path before run() returns.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from thumbnailer.config import Settings
from thumbnailer.constants import (
    PREVIEW_CONTENT_TYPE,
    PREVIEW_FPS,
    JobStage,
    MediaKind,
    PipelineState,
)
from thumbnailer.exceptions import ExternalProcessError, ImageTransformError, StorageError
from thumbnailer.job import Job
from thumbnailer.probe import DurationProbe
from thumbnailer.process import ProcessResult, ProcessRunner
from thumbnailer.reporter import StatusReporter
from thumbnailer.scratch import ScratchSpace
from thumbnailer.storage import StorageGateway
from thumbnailer.transforms import ImageResizeTransform, PreviewWindow, VideoPreviewTransform

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Success:
    job: Job
    destination_key: str
    duration_secs: int | None = None
    ok = True

    def to_dict(self) -> dict:
        result = {
            "status": "completed",
            "bucket": self.job.destination_bucket,
            "key": self.destination_key,
        }
        if self.duration_secs is not None:
            result["duration_secs"] = self.duration_secs
        return result


@dataclass(frozen=True)
class Failure:
    stage: JobStage
    cause: str
    ok = False


@dataclass(frozen=True)
class Skipped:
    """Not a job at all: the object is ignored on purpose."""
    key: str
    reason: str
    ok = True

    def to_dict(self) -> dict:
        return {"status": "skipped", "key": self.key, "reason": self.reason}


Outcome = Success | Failure


class ThumbnailPipeline:
    def __init__(
        self,
        storage: StorageGateway,
        runner: ProcessRunner,
        reporter: StatusReporter,
        scratch_dir: Path,
        *,
        ffmpeg_binary: str = "ffmpeg",
        ffprobe_binary: str = "ffprobe",
        window: PreviewWindow = PreviewWindow(),
        fps: int = PREVIEW_FPS,
    ) -> None:
        self._storage = storage
        self._runner = runner
        self._reporter = reporter
        self._scratch_dir = scratch_dir
        self._ffmpeg_binary = ffmpeg_binary
        self._window = window
        self._fps = fps
        self._probe = DurationProbe(runner, ffprobe_binary)
        self.state = PipelineState.PENDING

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        storage: StorageGateway | None = None,
    ) -> ThumbnailPipeline:
        return cls(
            storage=storage or StorageGateway(region_name=settings.aws_region),
            runner=ProcessRunner(cwd=settings.scratch_dir, timeout=settings.process_timeout_secs),
            reporter=StatusReporter(timeout=settings.api_timeout_secs),
            scratch_dir=settings.scratch_dir,
            ffmpeg_binary=settings.resolve_tool(settings.ffmpeg_binary),
            ffprobe_binary=settings.resolve_tool(settings.ffprobe_binary),
            window=PreviewWindow(settings.preview_offset_secs, settings.preview_duration_secs),
            fps=settings.preview_fps,
        )

    def run(self, job: Job) -> Outcome:
        logger.info(
            "Job start: s3://%s/%s (%s) -> s3://%s/%s",
            job.source_bucket, job.source_key, job.media_kind.value,
            job.destination_bucket, job.destination_key,
        )
        self.state = PipelineState.PENDING
        runners = {
            MediaKind.IMAGE: self._run_image,
            MediaKind.VIDEO: self._run_video,
        }
        outcome = runners[job.media_kind](job)
        self._advance(PipelineState.DONE)

        if outcome.ok:
            logger.info("Job succeeded: s3://%s/%s", job.destination_bucket, outcome.destination_key)
        else:
            logger.error("Job failed at %s: %s", outcome.stage.value, outcome.cause)
        return outcome

    def _advance(self, state: PipelineState) -> None:
        logger.debug("Pipeline state %s -> %s", self.state.value, state.value)
        self.state = state

    # ── Video ────────────────────────────────────────────────────────────────

    def _run_video(self, job: Job) -> Outcome:
        video = VideoPreviewTransform(
            self._runner,
            width=job.output_width,
            ffmpeg_binary=self._ffmpeg_binary,
            window=self._window,
            fps=self._fps,
        )

        with ScratchSpace(self._scratch_dir) as scratch:
            source = scratch.file(job.source_scratch_name)
            palette = scratch.file(job.palette_scratch_name)
            preview = scratch.file(job.preview_scratch_name)

            try:
                self._storage.download_to_file(job.source_bucket, job.source_key, source.path)
            except StorageError as exc:
                logger.error("Download failed: %s", exc)
                self._finish(scratch)
                return Failure(JobStage.DOWNLOAD, str(exc))
            self._advance(PipelineState.DOWNLOADED)

            logger.info("Generating palette...")
            result = video.generate_palette(source.path, palette.path)
            if not result.ok:
                self._finish(scratch)
                return _process_failure(JobStage.PALETTE, result)

            logger.info("Generating gif...")
            result = video.generate_animation(source.path, palette.path, preview.path)
            if not result.ok:
                self._finish(scratch)
                return _process_failure(JobStage.ANIMATE, result)
            self._advance(PipelineState.TRANSFORMED)

            duration = self._probe.probe(source.path)
            self._report_duration(job, duration)
            self._advance(PipelineState.REPORTED)

            logger.info("Deleting downloaded file and palette.")
            scratch.release(source)
            scratch.release(palette)

            try:
                with open(preview.path, "rb") as fh:
                    self._storage.upload(
                        job.destination_bucket, job.destination_key, PREVIEW_CONTENT_TYPE, fh,
                    )
            except StorageError as exc:
                logger.error("Upload failed: %s", exc)
                self._finish(scratch)
                return Failure(JobStage.UPLOAD, str(exc))
            except OSError as exc:
                logger.error("Generated preview could not be read: %s", exc)
                self._finish(scratch)
                return Failure(JobStage.UPLOAD, f"cannot read {preview.name}: {exc}")
            self._advance(PipelineState.UPLOADED)

            logger.info("%s complete. Deleting now.", preview.name)
            scratch.release(preview)
            self._finish(scratch)
            return Success(job, job.destination_key, duration)

    def _report_duration(self, job: Job, duration: int) -> None:
        api = job.api
        try:
            self._reporter.report(job.source_key, duration, api.url, api.username, api.password)
        except Exception:
            logger.exception("Duration report for %s raised", job.source_key)

    def _finish(self, scratch: ScratchSpace) -> None:
        if not scratch.close():
            logger.warning("Some scratch files in %s could not be removed", scratch.directory)
        self._advance(PipelineState.CLEANED_UP)

    # ── Image ────────────────────────────────────────────────────────────────

    def _run_image(self, job: Job) -> Outcome:
        try:
            original = self._storage.fetch_object(job.source_bucket, job.source_key)
        except StorageError as exc:
            logger.error("Fetch failed: %s", exc)
            return Failure(JobStage.FETCH, str(exc))
        self._advance(PipelineState.DOWNLOADED)

        try:
            resized = ImageResizeTransform(job.output_width).apply(original.body)
        except ImageTransformError as exc:
            logger.error("Resize failed for %s: %s", job.source_key, exc)
            return Failure(JobStage.RESIZE, str(exc))
        self._advance(PipelineState.TRANSFORMED)

        try:
            self._storage.upload(
                job.destination_bucket, job.destination_key, original.content_type, resized,
            )
        except StorageError as exc:
            logger.error("Upload failed: %s", exc)
            return Failure(JobStage.UPLOAD, str(exc))
        self._advance(PipelineState.UPLOADED)
        # Images never touch local disk; nothing to clean
        self._advance(PipelineState.CLEANED_UP)
        return Success(job, job.destination_key)


def _process_failure(stage: JobStage, result: ProcessResult) -> Failure:
    return Failure(stage, str(ExternalProcessError(result)))
