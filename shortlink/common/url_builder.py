"""Building the public short URL handed back to link creators."""

from typing import Mapping, Optional


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    """Case-insensitive header lookup; blank values count as missing."""
    name = name.lower()
    for key, value in headers.items():
        if key.lower() == name and value and value.strip():
            return value.strip()
    return None


def normalize_prefix(prefix: Optional[str]) -> str:
    """'/s/', 's' and '/s' all become '/s'; empty stays empty."""
    p = (prefix or "").strip().strip("/")
    return "/" + p if p else ""


def build_base_url(
    headers: Mapping[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Build base URL from headers or fallback.

    Priority:
    1. X-Forwarded-Proto + X-Forwarded-Host
    2. Request scheme + host
    3. Fallback base URL from config
    """
    proto = _header(headers, "x-forwarded-proto")
    host = _header(headers, "x-forwarded-host")
    if proto and host:
        # Proxies may append a chain ("https, http"); the first hop is the client's
        return f"{proto.split(',')[0].strip()}://{host.split(',')[0].strip()}"

    if request_scheme and request_host:
        return f"{request_scheme}://{request_host}"

    return fallback_base_url.rstrip("/")


def get_forwarded_path_prefix(headers: Mapping[str, str]) -> str:
    """Path prefix from X-Forwarded-Prefix (set by a proxy that strips it), normalized."""
    return normalize_prefix(_header(headers, "x-forwarded-prefix"))


def build_short_url(
    short_code: str,
    base_url: str,
    path_prefix: str = "",
) -> str:
    """Build complete short URL.

    Args:
        short_code: The short code
        base_url: Base URL (e.g., https://example.com)
        path_prefix: Optional path prefix (e.g., /s)

    Returns:
        Complete short URL
    """
    return f"{base_url.rstrip('/')}{normalize_prefix(path_prefix)}/{short_code}"
