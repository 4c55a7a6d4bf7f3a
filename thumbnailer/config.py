import os
import shutil
import tempfile
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, PositiveInt, field_validator
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from thumbnailer.constants import (
    DEFAULT_BUCKET_SUFFIX,
    DEFAULT_OUTPUT_WIDTH,
    PREVIEW_DURATION_SECS,
    PREVIEW_FPS,
    PREVIEW_OFFSET_SECS,
)


class ApiSettings(BaseModel):
    """Gallery API used to report video durations."""
    url: str = ""
    username: str = ""
    password: str = ""


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        json_file="config.json",
        extra="ignore",
    )

    # ── Output ───────────────────────────────────────────────────────────────
    output_width: PositiveInt = DEFAULT_OUTPUT_WIDTH
    # Empty means "<source-bucket><destination_bucket_suffix>"
    destination_bucket: str = ""
    destination_bucket_suffix: str = DEFAULT_BUCKET_SUFFIX

    # ── Scratch space / external tools ───────────────────────────────────────
    scratch_dir: Path = Path(tempfile.gettempdir())
    ffmpeg_binary: str = "ffmpeg"
    ffprobe_binary: str = "ffprobe"
    # Extra directories searched before PATH (e.g. the Lambda task root)
    tool_search_path: str = ""
    process_timeout_secs: float | None = None

    preview_offset_secs: PositiveInt = PREVIEW_OFFSET_SECS
    preview_duration_secs: PositiveInt = PREVIEW_DURATION_SECS
    preview_fps: PositiveInt = PREVIEW_FPS

    # ── Status API ───────────────────────────────────────────────────────────
    api: ApiSettings = ApiSettings()
    api_timeout_secs: float = 10.0

    # ── AWS ───────────────────────────────────────────────────────────────────
    aws_region: str | None = None

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment beats .env, which beats the static config.json
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    def resolve_tool(self, name: str) -> str:
        """Locate a binary on tool_search_path, then PATH. Falls back to the bare name."""
        search = os.pathsep.join(
            p for p in (self.tool_search_path, os.environ.get("PATH", "")) if p
        )
        return shutil.which(name, path=search) or name
