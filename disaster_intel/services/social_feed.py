"""
Social media monitoring for active disasters.

Posts come from the live Twitter search when a bearer token is configured
and the search returns something, and from the deterministic mock feed
otherwise. Both go through the same normalization and classification, so
the ``source`` field is the only way to tell them apart.
"""

from typing import Any, Sequence

from pydantic import ValidationError

from disaster_intel.models.social import Author, PostSource, Priority, SocialPost
from disaster_intel.providers.twitter import TwitterClient
from disaster_intel.services.classifier import (
    analyze_priority,
    classify_report_type,
    extract_keywords,
)
from disaster_intel.services.mock_feed import mock_social_media_reports
from disaster_intel.utils.cache.cache import CacheStore
from disaster_intel.utils.exceptions import DisasterIntelError
from disaster_intel.utils.logging.logger import get_component_logger, warn_once

logger = get_component_logger("social_feed")

DEFAULT_SEARCH_QUERY = "disaster OR emergency OR flood OR earthquake OR fire"
DEFAULT_MAX_RESULTS = 20
ALERT_PRIORITIES = frozenset({Priority.CRITICAL, Priority.HIGH})


def build_search_query(keywords: Sequence[str]) -> str:
    """OR-join quoted keywords, or use the default disaster query."""
    if not keywords:
        return DEFAULT_SEARCH_QUERY
    return " OR ".join(f'"{keyword}"' for keyword in keywords)


def normalize_post(item: dict[str, Any], source: PostSource) -> SocialPost:
    """Map a raw live or mock item onto the SocialPost shape and classify it."""
    content = item.get("text") or item.get("content") or ""
    if not isinstance(content, str):
        content = str(content)
    return SocialPost(
        id=str(item.get("id")),
        content=content,
        author=Author(
            id=item.get("author_id"),
            username=item.get("username"),
            name=item.get("name"),
        ),
        timestamp=item.get("created_at"),
        source=source,
        priority=analyze_priority(content),
        type=classify_report_type(content),
        keywords=extract_keywords(content),
    )


class SocialFeedAggregator:
    """Fetches, normalizes and classifies social posts about a disaster."""

    def __init__(
        self,
        cache: CacheStore,
        twitter: TwitterClient,
        max_results: int = DEFAULT_MAX_RESULTS,
    ):
        self.cache = cache
        self.twitter = twitter
        self.max_results = max_results

        if not self.twitter.configured:
            warn_once(
                logger,
                "TWITTER_BEARER_TOKEN",
                "Twitter API credentials not found. Using mock data.",
            )

    async def get_social_media_reports(
        self, disaster_id: str, keywords: Sequence[str] | None = None
    ) -> list[SocialPost]:
        """
        Get classified posts for a disaster.

        Args:
            disaster_id: Disaster identifier
            keywords: Optional filter terms; order matters for caching

        Returns:
            list[SocialPost]: Live posts, or the mock feed when live data is unavailable
        """
        keywords = list(keywords or [])
        cache_key = self.cache.generate_key("social_media", disaster_id, ",".join(keywords))
        cached = await self.cache.get(cache_key)
        if cached is not None:
            try:
                return [SocialPost.model_validate(post) for post in cached]
            except (TypeError, ValidationError):
                logger.warning(f"Discarding malformed social media cache entry {cache_key}")

        posts = await self.cache.coalesce(
            cache_key, lambda: self._collect_and_cache(cache_key, disaster_id, keywords)
        )
        return list(posts)

    async def _collect_and_cache(
        self, cache_key: str, disaster_id: str, keywords: list[str]
    ) -> list[SocialPost]:
        posts = await self._live_reports(keywords)
        if not posts:
            raw = self.get_mock_social_media_reports(disaster_id, keywords)
            posts = [normalize_post(item, PostSource.MOCK) for item in raw]

        await self.cache.set(cache_key, [post.model_dump(mode="json") for post in posts])
        return posts

    async def _live_reports(self, keywords: list[str]) -> list[SocialPost]:
        if not self.twitter.configured:
            return []

        try:
            items = await self.twitter.search_recent(
                build_search_query(keywords), max_results=self.max_results
            )
        except DisasterIntelError as e:
            logger.error(f"Twitter API error: {e.message}")
            return []

        posts = []
        for item in items:
            try:
                posts.append(normalize_post(item, PostSource.LIVE))
            except ValidationError as e:
                logger.warning(f"Skipping malformed post {item.get('id')}: {str(e)}")
        return posts

    def get_mock_social_media_reports(
        self, disaster_id: str, keywords: Sequence[str] | None = None
    ) -> list[dict[str, Any]]:
        """Raw mock reports (declared priority and type, not classified)."""
        return mock_social_media_reports(disaster_id, list(keywords or []), now=self.cache.now())

    async def get_priority_alerts(self, disaster_id: str) -> list[SocialPost]:
        """Critical and high priority posts for a disaster."""
        reports = await self.get_social_media_reports(disaster_id, [])
        return [post for post in reports if post.priority in ALERT_PRIORITIES]
