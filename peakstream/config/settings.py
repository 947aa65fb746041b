"""Application configuration"""
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_PATH = Path(__file__).resolve().parent.parent / "data" / "sensors.json"


class Settings(BaseSettings):
    """Runtime settings, overridable with PEAKSTREAM_* environment variables"""
    model_config = SettingsConfigDict(
        env_prefix="PEAKSTREAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 4001
    log_level: str = "INFO"
    data_path: Path = DEFAULT_DATA_PATH

    # Streaming
    emission_interval_ms: int = Field(2000, gt=0, description="Delay between two readings of one session")

    # Dashboard
    buffer_capacity: int = Field(50, gt=0, description="Readings kept by each dashboard")
    default_display_width: int = Field(20, gt=0)
    max_display_width: int = Field(50, gt=0)
    server_url: str = "ws://localhost:4001/ws"
    connect_timeout_seconds: float = Field(10.0, gt=0)

    @model_validator(mode="after")
    def _check_widths(self):
        if self.default_display_width > self.max_display_width:
            raise ValueError("default_display_width cannot exceed max_display_width")
        if self.max_display_width > self.buffer_capacity:
            raise ValueError("max_display_width cannot exceed buffer_capacity")
        return self


settings = Settings()

EMISSION_INTERVAL_MS = settings.emission_interval_ms
BUFFER_CAPACITY = settings.buffer_capacity
DEFAULT_DISPLAY_WIDTH = settings.default_display_width
MAX_DISPLAY_WIDTH = settings.max_display_width
