"""
S3 "object created" notifications, delivered directly or wrapped in SQS.
"""
from __future__ import annotations

import json
import logging
import urllib.parse

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class S3Bucket(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""


class S3Object(BaseModel):
    model_config = ConfigDict(extra="ignore")

    key: str = ""
    size: int | None = None


class S3Entity(BaseModel):
    model_config = ConfigDict(extra="ignore")

    bucket: S3Bucket = Field(default_factory=S3Bucket)
    object: S3Object = Field(default_factory=S3Object)


class S3EventRecord(BaseModel):
    """One record of an S3 event notification."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    event_name: str = Field(default="", alias="eventName")
    s3: S3Entity = Field(default_factory=S3Entity)

    @property
    def bucket(self) -> str:
        return self.s3.bucket.name

    @property
    def key(self) -> str:
        # S3 URL-encodes keys in notifications, spaces as "+"
        return urllib.parse.unquote_plus(self.s3.object.key)


def s3_records(event: dict) -> list[S3EventRecord]:
    """Flatten an S3 or SQS-wrapped S3 event into its S3 records.

    A malformed event is logged and treated as carrying no records.
    """
    try:
        raw: list = []
        for record in event.get("Records") or []:
            # SQS wrapper: unwrap the S3 event from the SQS message body
            if isinstance(record, dict) and record.get("eventSource") == "aws:sqs":
                body = json.loads(record.get("body") or "{}")
                raw.extend(body.get("Records") or [])
            else:
                raw.append(record)
        return [S3EventRecord.model_validate(r) for r in raw]
    except (ValueError, AttributeError, TypeError) as exc:
        # json.JSONDecodeError and pydantic ValidationError are ValueErrors
        logger.error("Malformed event ignored: %s", exc)
        return []


def first_s3_record(event: dict) -> S3EventRecord | None:
    records = s3_records(event)
    if not records:
        return None
    if len(records) > 1:
        logger.warning("Event carries %d records; only the first is processed", len(records))
    return records[0]
