"""Client for the Gemini generateContent REST endpoint."""

from typing import Any

import httpx

from disaster_intel.providers.base import HttpProvider
from disaster_intel.utils.exceptions import ConfigurationMissingError, UpstreamError


class GeminiClient(HttpProvider):
    """Text and text+image prompts against Gemini models."""

    service_name = "Gemini"

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        text_model: str = "gemini-1.5-flash",
        vision_model: str = "gemini-1.5-flash",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(timeout=timeout, transport=transport)
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.text_model = text_model
        self.vision_model = vision_model

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_config(cls, config, transport: httpx.AsyncBaseTransport | None = None) -> "GeminiClient":
        return cls(
            api_key=config.api_key,
            base_url=config.base_url,
            text_model=config.text_model,
            vision_model=config.vision_model,
            timeout=config.request_timeout,
            transport=transport,
        )

    async def generate_text(self, prompt: str, operation: str = "generate_text") -> str:
        return await self._generate(self.text_model, [{"text": prompt}], operation)

    async def generate_with_image(
        self,
        prompt: str,
        image_base64: str,
        mime_type: str = "image/jpeg",
        operation: str = "generate_with_image",
    ) -> str:
        parts = [
            {"text": prompt},
            {"inline_data": {"mime_type": mime_type, "data": image_base64}},
        ]
        return await self._generate(self.vision_model, parts, operation)

    async def _generate(self, model: str, parts: list[dict[str, Any]], operation: str) -> str:
        if not self.api_key:
            raise ConfigurationMissingError("Gemini API key not available", setting="GEMINI_API_KEY")

        response = await self._send(
            operation,
            "POST",
            f"{self.base_url}/models/{model}:generateContent",
            headers={"x-goog-api-key": self.api_key},
            json={"contents": [{"parts": parts}]},
        )
        payload = self._json(response, operation)

        try:
            text = payload["candidates"][0]["content"]["parts"][0]["text"].strip()
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            self.record(operation, "error")
            raise UpstreamError(
                "Gemini response contained no text candidate",
                service_name=self.service_name,
                operation=operation,
            ) from e

        self.record(operation, "success")
        return text
