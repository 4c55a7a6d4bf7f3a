"""Fakes and event builders shared by the test modules."""
import io
import json
from pathlib import Path

from PIL import Image

from thumbnailer.exceptions import StorageError
from thumbnailer.process import ProcessResult
from thumbnailer.storage import StoredObject


class FakeStorage:
    """In-memory stand-in for StorageGateway."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], StoredObject] = {}
        self.uploads: list[tuple[str, str, str, bytes]] = []
        self.fail_download = False
        self.fail_upload = False

    def put(self, bucket: str, key: str, body: bytes, content_type: str) -> None:
        self.objects[(bucket, key)] = StoredObject(body=body, content_type=content_type)

    def _get(self, bucket: str, key: str) -> StoredObject:
        if self.fail_download or (bucket, key) not in self.objects:
            raise StorageError("download", bucket, key, "NoSuchKey: The specified key does not exist.")
        return self.objects[(bucket, key)]

    def download_to_file(self, bucket: str, key: str, path: Path) -> int:
        obj = self._get(bucket, key)
        path.write_bytes(obj.body)
        return len(obj.body)

    def fetch_object(self, bucket: str, key: str) -> StoredObject:
        return self._get(bucket, key)

    def upload(self, bucket: str, key: str, content_type: str, body) -> None:
        if self.fail_upload:
            raise StorageError("upload", bucket, key, "AccessDenied: Access Denied")
        data = body if isinstance(body, bytes) else body.read()
        self.uploads.append((bucket, key, content_type, data))


class FakeRunner:
    """Pretends to be ffmpeg/ffprobe: writes the output file named last on the command line."""

    def __init__(self, probe_output: str = '{"format": {"duration": "42.9"}}') -> None:
        self.calls: list[list[str]] = []
        self.inputs_present: list[bool] = []
        self.probe_output = probe_output
        self.fail_palette = False
        self.fail_animation = False
        self.fail_probe = False

    def run(self, args) -> ProcessResult:
        args = [str(a) for a in args]
        self.calls.append(args)
        program = Path(args[0]).name

        if program == "ffprobe":
            if self.fail_probe:
                return ProcessResult(tuple(args), 1, "", "probe error")
            return ProcessResult(tuple(args), 0, self.probe_output, "")

        inputs = [Path(args[i + 1]) for i, a in enumerate(args) if a == "-i"]
        self.inputs_present.append(all(p.is_file() for p in inputs))
        is_palette = any("palettegen" in a for a in args)
        if (is_palette and self.fail_palette) or (not is_palette and self.fail_animation):
            return ProcessResult(tuple(args), 1, "", "Invalid data found when processing input")
        Path(args[-1]).write_bytes(b"PNG" if is_palette else b"GIF89a")
        return ProcessResult(tuple(args), 0, "", "")

    @property
    def ffmpeg_calls(self) -> list[list[str]]:
        return [c for c in self.calls if Path(c[0]).name == "ffmpeg"]


class FakeReporter:
    def __init__(self) -> None:
        self.reports: list[tuple] = []
        self.error: Exception | None = None

    def report(self, asset_name, duration_secs, endpoint, username, password) -> None:
        self.reports.append((asset_name, duration_secs, endpoint, username, password))
        if self.error is not None:
            raise self.error


def make_image(fmt: str = "PNG", size: tuple[int, int] = (400, 300), mode: str = "RGB") -> bytes:
    buf = io.BytesIO()
    Image.new(mode, size, color=(200, 30, 30) if mode == "RGB" else None).save(buf, format=fmt)
    return buf.getvalue()


def s3_event(bucket: str, key: str) -> dict:
    return {
        "Records": [
            {
                "eventSource": "aws:s3",
                "eventName": "ObjectCreated:Put",
                "s3": {"bucket": {"name": bucket}, "object": {"key": key, "size": 1024}},
            }
        ]
    }


def sqs_event(bucket: str, key: str) -> dict:
    return {
        "Records": [
            {"eventSource": "aws:sqs", "body": json.dumps(s3_event(bucket, key))},
        ]
    }

