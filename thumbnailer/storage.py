"""
S3 access for the pipeline: streamed downloads, buffered fetches, uploads.

Download flow (video):
  open_download_stream → chunks copied into a scratch file.
Fetch flow (image):
  fetch_object → whole body in memory + its ContentType.
Upload:
  bytes  → put_object
  files  → upload_fileobj, with progress logged as it goes.

Every boto3/botocore error is re-raised as StorageError; the provider
diagnostic is kept as a string and never interpreted.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from thumbnailer.constants import DEFAULT_CONTENT_TYPE
from thumbnailer.exceptions import StorageError

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class StoredObject:
    body: bytes
    content_type: str


class UploadProgress:
    """boto3 transfer callback: logs cumulative bytes sent."""

    def __init__(self, label: str, total: int | None = None) -> None:
        self.label = label
        self.total = total
        self.loaded = 0

    def __call__(self, bytes_transferred: int) -> None:
        self.loaded += bytes_transferred
        logger.info("%s Progress: %d / %s", self.label, self.loaded, self.total or "?")


class StorageGateway:
    def __init__(self, client: Any | None = None, region_name: str | None = None) -> None:
        self._client = client or boto3.client("s3", region_name=region_name)

    def open_download_stream(self, bucket: str, key: str):
        """Return the botocore StreamingBody for s3://bucket/key."""
        logger.info("Starting download: s3://%s/%s", bucket, key)
        try:
            response = self._client.get_object(Bucket=bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError("download", bucket, key, _diagnostic(exc)) from exc
        return response["Body"]

    def download_to_file(self, bucket: str, key: str, path: Path) -> int:
        """Stream an object into *path*, overwriting it. Returns bytes written."""
        stream = self.open_download_stream(bucket, key)
        written = 0
        try:
            with open(path, "wb") as fh:
                for chunk in stream.iter_chunks(_CHUNK_SIZE):
                    fh.write(chunk)
                    written += len(chunk)
        except (BotoCoreError, ClientError, OSError) as exc:
            raise StorageError("download", bucket, key, _diagnostic(exc)) from exc
        finally:
            stream.close()
        logger.info("Download finished: s3://%s/%s (%d bytes)", bucket, key, written)
        return written

    def fetch_object(self, bucket: str, key: str) -> StoredObject:
        """Read a whole object into memory together with its content type."""
        logger.info("Fetching: s3://%s/%s", bucket, key)
        try:
            response = self._client.get_object(Bucket=bucket, Key=key)
            body = response["Body"].read()
        except (BotoCoreError, ClientError) as exc:
            raise StorageError("download", bucket, key, _diagnostic(exc)) from exc
        return StoredObject(
            body=body,
            content_type=response.get("ContentType") or DEFAULT_CONTENT_TYPE,
        )

    def upload(
        self,
        bucket: str,
        key: str,
        content_type: str,
        body: bytes | IO[bytes],
    ) -> None:
        logger.info("Uploading %s to s3://%s/%s", content_type, bucket, key)
        try:
            if isinstance(body, (bytes, bytearray)):
                self._client.put_object(
                    Bucket=bucket,
                    Key=key,
                    Body=bytes(body),
                    ContentType=content_type,
                )
            else:
                self._client.upload_fileobj(
                    body,
                    bucket,
                    key,
                    ExtraArgs={"ContentType": content_type},
                    Callback=UploadProgress(key, _stream_size(body)),
                )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError("upload", bucket, key, _diagnostic(exc)) from exc
        logger.info("Upload complete: s3://%s/%s", bucket, key)


def _stream_size(stream: IO[bytes]) -> int | None:
    try:
        return os.fstat(stream.fileno()).st_size
    except (AttributeError, OSError, ValueError):
        return None


def _diagnostic(exc: Exception) -> str:
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        code = error.get("Code", "")
        message = error.get("Message", "")
        return f"{code}: {message}" if code else str(exc)
    return str(exc)
