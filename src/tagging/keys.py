"""Tag key lookups via the Resource Groups Tagging API, with a TTL cache."""

import asyncio
import time

from botocore.exceptions import BotoCoreError, ClientError

from src.config.settings import get_settings
from src.logging.structured import get_logger

logger = get_logger("tagging")


class TagKeyFetchError(RuntimeError):
    """Raised when tag keys cannot be fetched from AWS."""


class TagKeyProvider:
    """Serves tag key completions from keys fetched in a worker thread."""

    def __init__(self, region: str = "us-east-1", cache_ttl: int = 300):
        self._region = region
        self._cache_ttl = cache_ttl
        self._client = None
        self._keys: list[str] | None = None
        self._expires_at: float = 0.0

    def _get_client(self):
        """Lazy-init boto3 client."""
        if self._client is None:
            import boto3

            self._client = boto3.client("resourcegroupstaggingapi", region_name=self._region)
        return self._client

    async def load(self) -> list[str]:
        """Return tag keys, fetching them if the cache is empty or stale."""
        if self._keys is not None and time.monotonic() < self._expires_at:
            return self._keys

        keys = await asyncio.to_thread(self._fetch_keys)
        self._keys = keys
        self._expires_at = time.monotonic() + self._cache_ttl
        return keys

    def _fetch_keys(self) -> list[str]:
        try:
            paginator = self._get_client().get_paginator("get_tag_keys")
            keys = [key for page in paginator.paginate() for key in page.get("TagKeys", [])]
        except (ClientError, BotoCoreError) as e:
            logger.exception("Failed to fetch tag keys", extra={"fields": {"region": self._region}})
            raise TagKeyFetchError(f"Failed to fetch tag keys: {e}") from e

        logger.info("Fetched tag keys", extra={"fields": {"region": self._region, "count": len(keys)}})
        return sorted(set(keys))

    async def completions(self, prefix: str = "") -> list[str]:
        keys = await self.load()
        return [key for key in keys if key.startswith(prefix)]

    def invalidate(self) -> None:
        self._keys = None
        self._expires_at = 0.0


_provider: TagKeyProvider | None = None


def get_tag_key_provider() -> TagKeyProvider:
    """Get the tag key provider singleton."""
    global _provider
    if _provider is None:
        settings = get_settings()
        _provider = TagKeyProvider(region=settings.aws_region, cache_ttl=settings.tag_key_cache_ttl)
    return _provider
