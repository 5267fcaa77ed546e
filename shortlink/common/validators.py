"""Validation utilities for the short-link registry."""

from urllib.parse import urlparse
from typing import Iterable, Tuple

from ..shortcode import ShortCodeGenerator

MIN_VALIDITY_MINUTES = 1
MAX_VALIDITY_MINUTES = 1440
MAX_URL_LENGTH = 2048

# Words that would shadow HTTP routes if used as codes
RESERVED_CODES = frozenset({
    "api", "health", "docs", "redoc", "static", "favicon", "robots",
})


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate that a URL is absolute (scheme and host present).

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    if url != url.strip() or any(c.isspace() for c in url):
        return False, "URL must not contain whitespace"

    try:
        result = urlparse(url)
        hostname = result.hostname
        # Raises ValueError for ports outside 0-65535
        result.port
    except ValueError as e:
        return False, f"Invalid URL format: {str(e)}"

    if not result.scheme:
        return False, "URL must include a scheme (e.g. https://)"

    if not hostname:
        return False, "URL must have a valid host"

    return True, ""


def is_valid_validity(validity_minutes) -> Tuple[bool, str]:
    """Validate a validity window in whole minutes.

    Args:
        validity_minutes: Minutes the link stays resolvable

    Returns:
        Tuple of (is_valid, error_message)
    """
    if isinstance(validity_minutes, bool) or not isinstance(validity_minutes, int):
        return False, "Validity must be a whole number of minutes"

    if not MIN_VALIDITY_MINUTES <= validity_minutes <= MAX_VALIDITY_MINUTES:
        return False, (
            f"Validity must be between {MIN_VALIDITY_MINUTES} and "
            f"{MAX_VALIDITY_MINUTES} minutes"
        )

    return True, ""


def is_valid_short_code(
    short_code: str,
    max_length: int = 64,
    reserved: Iterable[str] = RESERVED_CODES,
) -> Tuple[bool, str]:
    """Validate a custom short code.

    Args:
        short_code: The short code to validate
        max_length: Maximum length for short code
        reserved: Codes that may not be claimed

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not short_code or not isinstance(short_code, str):
        return False, "Short code is required"

    if len(short_code) > max_length:
        return False, f"Short code must be at most {max_length} characters"

    if not ShortCodeGenerator.validate_format(short_code):
        return False, "Short code can only contain letters, numbers, hyphens, and underscores"

    if short_code.lower() in reserved:
        return False, f"'{short_code}' is a reserved word and cannot be used"

    return True, ""
