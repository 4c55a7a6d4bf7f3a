"""
Job model and key naming.

All derived names are pure functions of the source object:

  videos/clip.mp4  -> key_prefix       videos/clip
                   -> destination_key  videos/thumbnail-clip.gif
                   -> scratch files    source-<token>.mp4, palette-<token>.png,
                                       preview-<token>.gif

<token> is a digest of bucket/key, so a retried job overwrites the files of
an earlier aborted run and two different objects never share a name.
"""
from __future__ import annotations

import hashlib
import posixpath
import re
from collections.abc import Callable
from dataclasses import dataclass

from thumbnailer.config import Settings
from thumbnailer.constants import (
    EXTENSION_KINDS,
    PREVIEW_EXTENSION,
    THUMBNAIL_PREFIX,
    MediaKind,
)

_EXTENSION_RE = re.compile(r"\.[^/.]+$")

# (source_bucket, media_kind) -> destination bucket
DestinationResolver = Callable[[str, MediaKind], str]


@dataclass(frozen=True)
class ApiCredentials:
    url: str
    username: str
    password: str

    def __repr__(self) -> str:
        return f"ApiCredentials(url={self.url!r}, username={self.username!r}, password='***')"


@dataclass(frozen=True)
class Job:
    source_bucket: str
    source_key: str
    destination_bucket: str
    media_kind: MediaKind
    output_width: int
    api: ApiCredentials | None = None

    def __post_init__(self) -> None:
        if self.output_width <= 0:
            raise ValueError(f"output_width must be positive, got {self.output_width}")
        if self.media_kind is MediaKind.VIDEO and self.api is None:
            raise ValueError("Video jobs need gallery API credentials")

    @property
    def key_prefix(self) -> str:
        return strip_extension(self.source_key)

    @property
    def source_extension(self) -> str:
        return self.source_key[len(self.key_prefix):]

    @property
    def output_extension(self) -> str:
        if self.media_kind is MediaKind.VIDEO:
            return PREVIEW_EXTENSION
        return self.source_extension.lstrip(".")

    @property
    def destination_key(self) -> str:
        return destination_key(self.key_prefix, self.output_extension)

    @property
    def scratch_token(self) -> str:
        digest = hashlib.sha1(f"{self.source_bucket}/{self.source_key}".encode("utf-8"))
        return digest.hexdigest()[:16]

    @property
    def source_scratch_name(self) -> str:
        return f"source-{self.scratch_token}{self.source_extension.lower()}"

    @property
    def palette_scratch_name(self) -> str:
        return f"palette-{self.scratch_token}.png"

    @property
    def preview_scratch_name(self) -> str:
        return f"preview-{self.scratch_token}.{PREVIEW_EXTENSION}"


def strip_extension(key: str) -> str:
    return _EXTENSION_RE.sub("", key)


def destination_key(key_prefix: str, extension: str) -> str:
    """``dir/name`` + ``gif`` -> ``dir/thumbnail-name.gif``."""
    directory, basename = posixpath.split(key_prefix)
    name = f"{THUMBNAIL_PREFIX}{basename}.{extension}"
    return posixpath.join(directory, name) if directory else name


def media_kind_for_key(key: str) -> MediaKind | None:
    """Map a key's extension to a MediaKind; None when unsupported or absent."""
    prefix = strip_extension(key)
    if prefix == key:
        return None
    return EXTENSION_KINDS.get(key[len(prefix):].lower())


def fixed_bucket(name: str) -> DestinationResolver:
    return lambda source_bucket, media_kind: name


def suffixed_bucket(suffix: str) -> DestinationResolver:
    return lambda source_bucket, media_kind: f"{source_bucket}{suffix}"


def resolver_from_settings(settings: Settings) -> DestinationResolver:
    if settings.destination_bucket:
        return fixed_bucket(settings.destination_bucket)
    return suffixed_bucket(settings.destination_bucket_suffix)


def build_job(
    bucket: str,
    key: str,
    settings: Settings,
    resolve_destination: DestinationResolver | None = None,
) -> Job | None:
    """Build the Job for s3://bucket/key, or None when the object is not ours to handle."""
    kind = media_kind_for_key(key)
    if kind is None:
        return None

    resolve_destination = resolve_destination or resolver_from_settings(settings)
    destination = resolve_destination(bucket, kind)
    # Our own output landing in the watched bucket must not trigger another job
    if destination == bucket and posixpath.basename(key).startswith(THUMBNAIL_PREFIX):
        return None

    api = None
    if kind is MediaKind.VIDEO:
        api = ApiCredentials(
            url=settings.api.url,
            username=settings.api.username,
            password=settings.api.password,
        )
    return Job(
        source_bucket=bucket,
        source_key=key,
        destination_bucket=destination,
        media_kind=kind,
        output_width=settings.output_width,
        api=api,
    )
