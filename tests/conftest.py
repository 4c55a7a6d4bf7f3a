from pathlib import Path

import pytest

from thumbnailer.config import ApiSettings, Settings
from thumbnailer.pipeline import ThumbnailPipeline
from helpers import FakeReporter, FakeRunner, FakeStorage


@pytest.fixture
def scratch_dir(tmp_path: Path) -> Path:
    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def settings(tmp_path: Path, scratch_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    # Keep any .env / config.json in the working directory out of the tests
    monkeypatch.chdir(tmp_path)
    return Settings(
        output_width=320,
        scratch_dir=scratch_dir,
        destination_bucket="media-thumbnails",
        api=ApiSettings(url="https://gallery.example.com/api/", username="bot", password="s3cret"),
    )


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def reporter() -> FakeReporter:
    return FakeReporter()


@pytest.fixture
def pipeline(storage, runner, reporter, scratch_dir) -> ThumbnailPipeline:
    return ThumbnailPipeline(storage, runner, reporter, scratch_dir)
