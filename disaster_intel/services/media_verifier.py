"""
Image authenticity checks for disaster reports.

Images are sent to a Gemini vision model with a fixed assessment prompt. The
model is asked for JSON; when it answers in prose instead, a keyword
heuristic reads the text. Fetch and provider failures resolve to a
"Verification failed" record rather than an exception.
"""

import json
import re

from pydantic import ValidationError

from disaster_intel.models.verification import (
    VerificationOutcome,
    VerificationRecord,
    VerificationSource,
)
from disaster_intel.providers.gemini import GeminiClient
from disaster_intel.providers.images import ImageFetcher
from disaster_intel.utils.cache.cache import CacheStore
from disaster_intel.utils.exceptions import DisasterIntelError, ParseError
from disaster_intel.utils.logging.logger import get_component_logger, warn_once

logger = get_component_logger("media_verifier")

VERIFICATION_PROMPT = """Analyze this image for signs of disaster context and potential manipulation. Look for:
1. Signs of natural disasters (flooding, fire, earthquake damage, etc.)
2. Evidence of image manipulation or editing
3. Context that suggests this is a real disaster scene

Return a JSON response with:
- verified: boolean (true if image appears to show real disaster context)
- confidence: number (0-1, confidence in the assessment)
- reason: string (explanation of the assessment)
- manipulation_detected: boolean (true if signs of editing detected)"""

REQUIRED_FIELDS = ("verified", "confidence", "reason", "manipulation_detected")
HEURISTIC_CONFIDENCE = 0.5

_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


def parse_structured(text: str) -> VerificationRecord:
    """
    Strictly parse provider text into a record.

    Raises:
        ParseError: If the text is not a JSON object with every required field
    """
    fenced = _FENCE.search(text)
    json_str = fenced.group(1).strip() if fenced else text.strip()

    try:
        data = json.loads(json_str)
    except ValueError as e:
        raise ParseError("Verification response is not JSON", expected_format="json") from e

    if not isinstance(data, dict) or any(field not in data for field in REQUIRED_FIELDS):
        raise ParseError(
            "Verification response is missing required fields",
            expected_format=", ".join(REQUIRED_FIELDS),
        )

    try:
        return VerificationRecord.model_validate({field: data[field] for field in REQUIRED_FIELDS})
    except ValidationError as e:
        raise ParseError(f"Verification response has invalid values: {str(e)}") from e


def parse_heuristic(text: str) -> VerificationRecord:
    """Read a prose answer using keyword presence."""
    lowered = text.lower()
    return VerificationRecord(
        verified="real" in lowered or "authentic" in lowered,
        confidence=HEURISTIC_CONFIDENCE,
        reason=text,
        manipulation_detected="manipulation" in lowered or "edited" in lowered,
    )


def interpret_response(text: str) -> VerificationOutcome:
    """Parse provider text, falling back to the heuristic reader."""
    try:
        return VerificationOutcome(parse_structured(text), VerificationSource.STRUCTURED)
    except ParseError as e:
        logger.debug(f"Structured parse failed, using heuristic: {e.message}")
        return VerificationOutcome(parse_heuristic(text), VerificationSource.HEURISTIC)


class MediaVerifier:
    """Assesses whether an image plausibly shows a real, unedited disaster scene."""

    def __init__(self, cache: CacheStore, gemini: GeminiClient, fetcher: ImageFetcher):
        self.cache = cache
        self.gemini = gemini
        self.fetcher = fetcher

        if not self.gemini.configured:
            warn_once(
                logger,
                "GEMINI_API_KEY:media",
                "Gemini API key not found. Image verification is disabled.",
            )

    async def verify_image(self, image_url: str) -> VerificationRecord:
        """
        Verify an image by URL.

        Args:
            image_url: Publicly reachable image location

        Returns:
            VerificationRecord: Always fully populated
        """
        if not self.gemini.configured:
            logger.debug("Gemini API key not available for image verification")
            return VerificationRecord.api_key_missing()

        cache_key = self.cache.generate_key("gemini", "image_verification", image_url)
        cached = await self.cache.get(cache_key)
        if cached:
            try:
                return VerificationRecord.model_validate(cached)
            except ValueError:
                logger.warning(f"Discarding malformed verification cache entry {cache_key}")

        outcome = await self.cache.coalesce(
            cache_key, lambda: self._assess_and_cache(cache_key, image_url)
        )
        return outcome.record if outcome is not None else VerificationRecord.failed()

    async def assess_image(self, image_url: str) -> VerificationOutcome | None:
        """
        Run a fresh assessment, bypassing the cache read.

        Returns:
            VerificationOutcome tagged with its parse path, or None if the
            image or the provider could not be reached
        """
        if not self.gemini.configured:
            return None
        cache_key = self.cache.generate_key("gemini", "image_verification", image_url)
        return await self._assess_and_cache(cache_key, image_url)

    async def _assess_and_cache(self, cache_key: str, image_url: str) -> VerificationOutcome | None:
        try:
            image_data, mime_type = await self.fetcher.fetch_base64(image_url)
            text = await self.gemini.generate_with_image(
                VERIFICATION_PROMPT, image_data, mime_type, operation="image_verification"
            )
        except DisasterIntelError as e:
            logger.error(f"Gemini image verification error: {e.message}")
            return None

        outcome = interpret_response(text)
        logger.info(
            "Image verification parsed",
            extra={"parse_source": outcome.source.value, "image_url": image_url},
        )
        await self.cache.set(cache_key, outcome.record.model_dump(mode="json"))
        return outcome
