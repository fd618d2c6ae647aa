"""HTTP client for the text-to-speech and video generation service.

Both operations are best-effort: an unconfigured service, an HTTP error, a
timeout or a video that is still rendering after the polling limit all
yield ``None`` and the caller builds an artifact without that media.
Requests are never retried.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from velocity.config import MEDIA_API_BASE_URL, MEDIA_API_KEY
from velocity.services.metrics import metrics

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 60.0
VIDEO_POLL_INTERVAL_SECONDS = 2.0
VIDEO_MAX_POLLS = 20
DEFAULT_VOICE = "Kore"


class MediaServiceError(Exception):
    """Raised for HTTP-level failures of the media service."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class MediaClient:
    """Async wrapper around the media generation REST API."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        poll_interval: float = VIDEO_POLL_INTERVAL_SECONDS,
        max_polls: int = VIDEO_MAX_POLLS,
    ) -> None:
        self._base_url = base_url or MEDIA_API_BASE_URL
        self._api_key = api_key or MEDIA_API_KEY
        self._poll_interval = poll_interval
        self._max_polls = max_polls
        self._client = client
        if self._client is None and self.configured:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                timeout=REQUEST_TIMEOUT_SECONDS,
            )

    @property
    def configured(self) -> bool:
        return bool(self._base_url and self._api_key) or self._client is not None

    async def _request(self, method: str, path: str, json_body: dict[str, Any] | None = None) -> dict[str, Any]:
        response = await self._client.request(method, path, json=json_body)
        if response.status_code >= 400:
            raise MediaServiceError(
                f"Media service error {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        return response.json()

    async def synthesize_speech(self, text: str, voice: str = DEFAULT_VOICE) -> str | None:
        """Return base64-encoded audio for *text*, or ``None``."""
        if not self.configured:
            logger.info("Media service not configured; skipping speech synthesis")
            return None
        try:
            with metrics.timer("media", "speech"):
                data = await self._request("POST", "/speech", {"text": text, "voice": voice})
        except (httpx.HTTPError, MediaServiceError, ValueError) as exc:
            logger.error("Audio generation failed: %s", exc)
            return None
        return data.get("audioContent") or None

    async def generate_video(self, prompt: str) -> str | None:
        """Start a video job and poll until it finishes; the video URI or ``None``."""
        if not self.configured:
            logger.info("Media service not configured; skipping video generation")
            return None
        try:
            with metrics.timer("media", "video"):
                operation = await self._request(
                    "POST",
                    "/videos",
                    {"prompt": prompt, "resolution": "720p", "aspectRatio": "16:9"},
                )
                polls = 0
                while not operation.get("done") and polls < self._max_polls:
                    await asyncio.sleep(self._poll_interval)
                    operation = await self._request("GET", f"/videos/{operation['name']}")
                    polls += 1
        except (httpx.HTTPError, MediaServiceError, KeyError, ValueError) as exc:
            logger.error("Video generation failed: %s", exc)
            return None

        if not operation.get("done"):
            logger.warning("Video still rendering after %d polls; giving up", self._max_polls)
            return None
        return operation.get("videoUri") or None

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
