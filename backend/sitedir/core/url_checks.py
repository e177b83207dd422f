"""URL Checks — absolute http/https URL predicate shared by validation and feed parsing."""

from urllib.parse import urlsplit

_ALLOWED_SCHEMES = frozenset({"http", "https"})


def is_valid_absolute_http_url(value: object) -> bool:
    """True for absolute http(s) URLs with a host, False for anything else."""
    if not isinstance(value, str) or not value:
        return False
    if any(ch.isspace() for ch in value):
        return False
    try:
        parts = urlsplit(value)
        hostname = parts.hostname
    except ValueError:
        return False
    return parts.scheme.lower() in _ALLOWED_SCHEMES and bool(hostname)
