"""Configuration management for s3mini."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    log_level: str = "WARNING"
    otel_enabled: bool = False
    otel_service_name: str = "s3mini"
    otel_exporter_endpoint: str = "http://localhost:4317"

    # Listing defaults, overridable per call and per CLI invocation
    max_parallel: int = Field(10, ge=1)
    delimiter: str = "/"
    search_depth: int = Field(0, ge=0)
    page_size: int = Field(1000, ge=1, le=1000)
    stream_buffer_size: int = Field(10000, ge=1)

    model_config = {
        "env_prefix": "S3MINI_",
        "case_sensitive": False,
    }


settings = Settings()
