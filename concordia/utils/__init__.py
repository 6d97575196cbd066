"""Small helpers shared across the package."""

from .logging_utils import configure_split_stream_logging

__all__ = ["configure_split_stream_logging"]
