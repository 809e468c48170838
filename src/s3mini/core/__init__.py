"""Core utilities and shared components for s3mini."""

from .config import settings
from .exceptions import S3MiniError, ValidationError
from .observability import get_logger, get_tracer

__all__ = ["settings", "S3MiniError", "ValidationError", "get_logger", "get_tracer"]
