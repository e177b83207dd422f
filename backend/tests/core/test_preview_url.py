"""Preview URL — tests for screenshot-provider URL derivation.

Tests cover:
    - Derived URL carries the site URL and the fixed screenshot query contract
    - Derivation is deterministic
    - A valid override is returned exactly; blank or invalid overrides fall back
    - Provider endpoint is configurable
"""

from urllib.parse import parse_qs, urlsplit

from sitedir.core.preview_url import (
    DEFAULT_PREVIEW_PROVIDER,
    build_screenshot_preview_url,
    resolve_preview_url,
)


def _query(url: str) -> dict[str, list[str]]:
    return parse_qs(urlsplit(url).query)


def test_derived_url_carries_site_and_screenshot_flag():
    derived = resolve_preview_url("https://x.com")
    query = _query(derived)
    assert query["url"] == ["https://x.com"]
    assert query["screenshot"] == ["true"]


def test_derived_url_full_query_contract():
    query = _query(build_screenshot_preview_url("https://example.com/a?b=1"))
    assert query == {
        "url": ["https://example.com/a?b=1"],
        "screenshot": ["true"],
        "meta": ["false"],
        "embed": ["screenshot.url"],
        "viewport.width": ["1920"],
        "viewport.height": ["1080"],
    }


def test_derived_url_uses_default_provider():
    assert resolve_preview_url("https://x.com").startswith(DEFAULT_PREVIEW_PROVIDER + "?")


def test_derivation_is_deterministic():
    assert resolve_preview_url("https://x.com") == resolve_preview_url("https://x.com")


def test_override_returned_exactly():
    override = "https://cdn.example.com/shots/x.png?v=2"
    assert resolve_preview_url("https://x.com", override) == override


def test_blank_override_falls_back_to_derived():
    assert resolve_preview_url("https://x.com", "   ") == build_screenshot_preview_url("https://x.com")


def test_invalid_override_falls_back_to_derived():
    assert resolve_preview_url("https://x.com", "not-a-url") == build_screenshot_preview_url("https://x.com")


def test_custom_provider():
    derived = resolve_preview_url("https://x.com", provider="https://shots.internal/render")
    assert derived.startswith("https://shots.internal/render?")
    assert _query(derived)["url"] == ["https://x.com"]
