"""
AWS Lambda handler — thumbnails and GIF previews.

Triggered by an S3 ObjectCreated event (directly or through SQS).

Flow:
  1. Reads bucket/key of the new object from the first S3 record.
  2. Resolves configuration (env, .env, config.json).
  3. Builds a Job; unsupported extensions are skipped, not failed.
  4. Images: resized to OUTPUT_WIDTH, same format, uploaded as
     thumbnail-<name>.<ext> next to the source key.
     Videos: 3-second GIF preview from the 30-second mark, uploaded as
     thumbnail-<name>.gif; duration reported to the gallery API.
  5. Returns the result dict, or raises JobFailed so the invocation
     is recorded as failed.

Environment variables:
  OUTPUT_WIDTH                — thumbnail width in pixels
  DESTINATION_BUCKET          — output bucket (default: <source>-thumbnail)
  SCRATCH_DIR                 — local scratch directory (default: system temp)
  TOOL_SEARCH_PATH            — extra directories holding ffmpeg/ffprobe
  API__URL, API__USERNAME, API__PASSWORD — gallery API for video durations
  LOG_LEVEL                   — root log level (default: INFO)
"""
from __future__ import annotations

import logging

from thumbnailer.config import Settings
from thumbnailer.constants import JobStage
from thumbnailer.events import first_s3_record
from thumbnailer.exceptions import JobFailed
from thumbnailer.job import DestinationResolver, build_job, media_kind_for_key
from thumbnailer.pipeline import Failure, Skipped, Success, ThumbnailPipeline

logger = logging.getLogger()
logger.setLevel(logging.INFO)


def handler(event: dict, context: object) -> dict:
    """Lambda entry point — processes one S3 object-created notification."""
    logger.info("Reading options from event: %s", event)
    outcome = process_event(event)
    if isinstance(outcome, Failure):
        raise JobFailed(outcome)
    return outcome.to_dict()


def process_event(
    event: dict,
    settings: Settings | None = None,
    pipeline: ThumbnailPipeline | None = None,
    resolve_destination: DestinationResolver | None = None,
) -> Success | Failure | Skipped:
    record = first_s3_record(event)
    if record is None or not record.bucket or not record.key:
        logger.info("No S3 object in event; nothing to do")
        return Skipped(key="", reason="no S3 record")

    # Unsupported objects never touch configuration
    if media_kind_for_key(record.key) is None:
        logger.info("Skipping unsupported object: s3://%s/%s", record.bucket, record.key)
        return Skipped(key=record.key, reason="unsupported file type")

    if settings is None:
        try:
            settings = Settings()
        except ValueError as exc:
            # pydantic ValidationError, SettingsError and malformed config.json
            logger.error("Invalid configuration: %s", exc)
            return Failure(JobStage.CONFIG, str(exc))
    logger.setLevel(settings.log_level)

    job = build_job(record.bucket, record.key, settings, resolve_destination)
    if job is None:
        logger.info("Skipping generated thumbnail: s3://%s/%s", record.bucket, record.key)
        return Skipped(key=record.key, reason="generated thumbnail")

    if pipeline is None:
        pipeline = ThumbnailPipeline.from_settings(settings)
    return pipeline.run(job)
