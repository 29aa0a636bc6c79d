"""Client for the Twitter v2 recent search endpoint."""

from typing import Any

import httpx

from disaster_intel.providers.base import HttpProvider
from disaster_intel.utils.exceptions import ConfigurationMissingError, UpstreamError
from disaster_intel.utils.logging.logger import get_component_logger

logger = get_component_logger("providers")

TWEET_FIELDS = "created_at,author_id,text"
USER_FIELDS = "username,name"


class TwitterClient(HttpProvider):
    """Recent-search client that joins author profiles onto each tweet."""

    service_name = "Twitter"

    def __init__(
        self,
        bearer_token: str | None,
        base_url: str = "https://api.twitter.com/2",
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(timeout=timeout, transport=transport)
        self.bearer_token = bearer_token
        self.base_url = base_url.rstrip("/")

    @property
    def configured(self) -> bool:
        return bool(self.bearer_token)

    @classmethod
    def from_config(cls, config, transport: httpx.AsyncBaseTransport | None = None) -> "TwitterClient":
        return cls(
            bearer_token=config.bearer_token,
            base_url=config.base_url,
            timeout=config.request_timeout,
            transport=transport,
        )

    async def search_recent(self, query: str, max_results: int = 20) -> list[dict[str, Any]]:
        """
        Search recent posts.

        Returns:
            Raw post dicts with ``id``, ``text``, ``author_id``, ``created_at`` and,
            when the author was expanded, ``username`` and ``name``
        """
        if not self.bearer_token:
            raise ConfigurationMissingError(
                "Twitter bearer token not available", setting="TWITTER_BEARER_TOKEN"
            )

        response = await self._send(
            "search",
            "GET",
            f"{self.base_url}/tweets/search/recent",
            headers={"Authorization": f"Bearer {self.bearer_token}"},
            params={
                "query": query,
                "max_results": max_results,
                "tweet.fields": TWEET_FIELDS,
                "expansions": "author_id",
                "user.fields": USER_FIELDS,
            },
        )
        payload = self._json(response, "search")
        if not isinstance(payload, dict):
            self.record("search", "error")
            raise UpstreamError(
                "Twitter returned an unexpected payload",
                service_name=self.service_name,
                operation="search",
            )

        tweets = payload.get("data")
        if not tweets:
            self.record("search", "no_results")
            return []
        if not isinstance(tweets, list):
            self.record("search", "error")
            raise UpstreamError(
                "Twitter returned posts in an unexpected shape",
                service_name=self.service_name,
                operation="search",
            )

        includes = payload.get("includes") or {}
        listed_users = includes.get("users") if isinstance(includes, dict) else None
        users = {
            str(user.get("id")): user
            for user in (listed_users if isinstance(listed_users, list) else [])
            if isinstance(user, dict) and user.get("id") is not None
        }
        skipped = sum(1 for tweet in tweets if not isinstance(tweet, dict))
        if skipped:
            logger.warning(f"Skipping {skipped} malformed posts in Twitter response")
        self.record("search", "success")
        return [
            {
                **tweet,
                "username": users.get(str(tweet.get("author_id")), {}).get("username"),
                "name": users.get(str(tweet.get("author_id")), {}).get("name"),
            }
            for tweet in tweets
            if isinstance(tweet, dict)
        ]
