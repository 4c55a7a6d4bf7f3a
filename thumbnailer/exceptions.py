"""
Thumbnailer — domain exceptions.

Each exception carries a preset message so callers only pass the facts
(bucket, key, process result). The orchestrator catches these at stage
boundaries and turns them into a Failure outcome.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from thumbnailer.pipeline import Failure
    from thumbnailer.process import ProcessResult


class ThumbnailerError(Exception):
    """Base class for every error raised by this package."""


# ── Storage ──────────────────────────────────────────────────────────────────

class StorageError(ThumbnailerError):
    def __init__(self, operation: str, bucket: str, key: str, diagnostic: str) -> None:
        self.operation = operation
        self.bucket = bucket
        self.key = key
        self.diagnostic = diagnostic
        super().__init__(
            f"S3 {operation} error for s3://{bucket}/{key}: {diagnostic}"
        )


# ── Transforms ───────────────────────────────────────────────────────────────

class ExternalProcessError(ThumbnailerError):
    def __init__(self, result: ProcessResult) -> None:
        self.result = result
        super().__init__(
            f"{result.program} exited with status {result.returncode}: "
            f"{result.output.strip()[-2000:]}"
        )


class ImageTransformError(ThumbnailerError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Image could not be resized: {reason}")


# ── Invocation ───────────────────────────────────────────────────────────────

class JobFailed(ThumbnailerError):
    """Raised from the Lambda entry point so the invocation is marked failed."""

    def __init__(self, failure: Failure) -> None:
        self.failure = failure
        super().__init__(f"{failure.stage.value} failed: {failure.cause}")
