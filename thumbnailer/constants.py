"""
Thumbnailer — static constants and enum types.
"""
import enum


class MediaKind(str, enum.Enum):
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"


class JobStage(str, enum.Enum):
    """Pipeline stage names, used to label a Failure."""
    CONFIG = "CONFIG"
    DOWNLOAD = "DOWNLOAD"
    PALETTE = "PALETTE"
    ANIMATE = "ANIMATE"
    FETCH = "FETCH"
    RESIZE = "RESIZE"
    UPLOAD = "UPLOAD"


class PipelineState(str, enum.Enum):
    PENDING = "PENDING"
    DOWNLOADED = "DOWNLOADED"
    TRANSFORMED = "TRANSFORMED"
    REPORTED = "REPORTED"
    UPLOADED = "UPLOADED"
    CLEANED_UP = "CLEANED_UP"
    DONE = "DONE"


# Lower-cased source extension -> media kind. Anything else is skipped.
EXTENSION_KINDS: dict[str, MediaKind] = {
    ".jpg": MediaKind.IMAGE,
    ".jpeg": MediaKind.IMAGE,
    ".png": MediaKind.IMAGE,
    ".gif": MediaKind.IMAGE,
    ".webp": MediaKind.IMAGE,
    ".bmp": MediaKind.IMAGE,
    ".tif": MediaKind.IMAGE,
    ".tiff": MediaKind.IMAGE,
    ".mp4": MediaKind.VIDEO,
    ".mov": MediaKind.VIDEO,
    ".avi": MediaKind.VIDEO,
    ".webm": MediaKind.VIDEO,
    ".mkv": MediaKind.VIDEO,
    ".m4v": MediaKind.VIDEO,
}

THUMBNAIL_PREFIX = "thumbnail-"

# Video previews are always animated GIFs
PREVIEW_EXTENSION = "gif"
PREVIEW_CONTENT_TYPE = "image/gif"

# Preview window: 3 seconds starting at the 30-second mark, 10 fps
PREVIEW_OFFSET_SECS = 30
PREVIEW_DURATION_SECS = 3
PREVIEW_FPS = 10

DEFAULT_OUTPUT_WIDTH = 320
DEFAULT_BUCKET_SUFFIX = "-thumbnail"

# Fallback when storage does not report a content type
DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Status API routes, relative to the configured endpoint
AUTH_ROUTE = "auth"
UPDATE_DURATION_ROUTE = "gallery/update_video_duration"
