"""Downloads images that are submitted for verification."""

import base64

import httpx

from disaster_intel.providers.base import HttpProvider

DEFAULT_MIME_TYPE = "image/jpeg"


class ImageFetcher(HttpProvider):
    """Fetches an image URL and returns it base64-encoded."""

    service_name = "ImageHost"

    async def fetch_base64(self, image_url: str) -> tuple[str, str]:
        """
        Download ``image_url``.

        Returns:
            Tuple of (base64 payload, MIME type)
        """
        response = await self._send("fetch_image", "GET", image_url, follow_redirects=True)
        content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
        mime_type = content_type if content_type.startswith("image/") else DEFAULT_MIME_TYPE
        self.record("fetch_image", "success")
        return base64.b64encode(response.content).decode("ascii"), mime_type

