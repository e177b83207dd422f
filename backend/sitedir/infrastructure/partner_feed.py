"""Partner Feed Client — fetches the partner "clients" list and normalizes it.

Invariants:
    - Endpoint = base URL without trailing slashes + path with exactly one leading slash
    - Authorization header sent only when an API key is configured
    - Non-2xx, transport failure, or non-JSON body -> FeedError (never a raw httpx error)
    - Returned entries are ephemeral: nothing here persists or caches

Design Decisions:
    - HTTP here, shape decoding in core/feed_normalize.py (ADR: ExMA impureim sandwich)
    - Upstream error body truncated in FeedError: the message ends up in public responses
"""

import logging

import httpx

from sitedir.core.directory_entry import FeedResult
from sitedir.core.errors import FeedError
from sitedir.core.feed_normalize import normalize_feed_payload
from sitedir.core.preview_url import DEFAULT_PREVIEW_PROVIDER

logger = logging.getLogger(__name__)

_ERROR_BODY_LIMIT = 200


def build_feed_endpoint(base_url: str, path: str) -> str:
    """Join base URL and path with exactly one slash."""
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


class PartnerFeedClient:
    """Reads the partner directory feed."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str,
        endpoint_path: str,
        api_key: str | None = None,
        preview_provider: str = DEFAULT_PREVIEW_PROVIDER,
    ):
        self.http = http
        self.endpoint = build_feed_endpoint(base_url, endpoint_path)
        self.api_key = api_key
        self.preview_provider = preview_provider

    @property
    def headers(self) -> dict[str, str]:
        if self.api_key:
            return {"Authorization": f"Bearer {self.api_key}"}
        return {}

    async def fetch(self) -> FeedResult:
        """Fetch and normalize the feed, or raise FeedError."""
        try:
            response = await self.http.get(self.endpoint, headers=self.headers)
        except httpx.HTTPError as e:
            raise FeedError(f"Failed to reach partner feed: {e}")

        if response.is_error:
            body = response.text[:_ERROR_BODY_LIMIT]
            raise FeedError(
                f"Failed to fetch partner clients ({response.status_code}): {body}",
            )

        try:
            payload = response.json()
        except ValueError:
            raise FeedError("Partner feed returned a non-JSON response")

        result = normalize_feed_payload(payload, self.preview_provider)
        logger.info(
            "Partner feed fetched",
            extra={
                "total_clients": result.total_clients,
                "skipped_invalid_url": result.skipped_invalid_url,
            },
        )
        return result
