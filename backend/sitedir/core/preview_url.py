"""Preview URL Resolver — derives a screenshot-preview URL for a site.

Invariants:
    - A non-empty, valid absolute override is returned unchanged
    - Otherwise the URL is built deterministically: same input, same output
    - No network call at resolution time (the provider screenshots lazily on image fetch)

Design Decisions:
    - Microlink query contract: url, screenshot=true, meta=false, embed=screenshot.url,
      fixed 1920x1080 viewport
    - Provider endpoint is a parameter (defaults to DEFAULT_PREVIEW_PROVIDER) so settings
      can repoint it without touching callers
"""

from urllib.parse import urlencode

from sitedir.core.url_checks import is_valid_absolute_http_url

DEFAULT_PREVIEW_PROVIDER = "https://api.microlink.io/"
VIEWPORT_WIDTH = 1920
VIEWPORT_HEIGHT = 1080


def build_screenshot_preview_url(
    website_url: str, provider: str = DEFAULT_PREVIEW_PROVIDER,
) -> str:
    """Screenshot-provider URL for website_url."""
    query = urlencode({
        "url": website_url,
        "screenshot": "true",
        "meta": "false",
        "embed": "screenshot.url",
        "viewport.width": str(VIEWPORT_WIDTH),
        "viewport.height": str(VIEWPORT_HEIGHT),
    })
    return f"{provider}?{query}"


def resolve_preview_url(
    url: str,
    override: str | None = None,
    provider: str = DEFAULT_PREVIEW_PROVIDER,
) -> str:
    """Return the override when usable, else the derived screenshot URL."""
    candidate = (override or "").strip()
    if candidate and is_valid_absolute_http_url(candidate):
        return candidate
    return build_screenshot_preview_url(url.strip(), provider)
