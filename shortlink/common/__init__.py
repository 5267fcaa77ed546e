"""Common utilities for the short-link service."""

from .validators import is_valid_url, is_valid_validity, is_valid_short_code, RESERVED_CODES
from .url_builder import build_base_url, build_short_url, get_forwarded_path_prefix
from .logging_config import setup_logging, get_logger

__all__ = [
    "is_valid_url",
    "is_valid_validity",
    "is_valid_short_code",
    "RESERVED_CODES",
    "build_base_url",
    "build_short_url",
    "get_forwarded_path_prefix",
    "setup_logging",
    "get_logger",
]
