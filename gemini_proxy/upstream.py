"""Google Gemini generateContent client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

import httpx

from .config import Settings

logger = logging.getLogger("gemini-proxy.upstream")

DEFAULT_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class UpstreamReply:
    """Whatever Gemini answered, any status code included."""

    status_code: int
    content_type: str
    body: bytes


@dataclass(frozen=True)
class UpstreamFailure:
    """Gemini could not be reached at the transport level."""

    reason: str


UpstreamResult = Union[UpstreamReply, UpstreamFailure]


def _redact(message: str, secret: str) -> str:
    if secret and secret in message:
        return message.replace(secret, "***")
    return message


class GeminiUpstream:
    """Forwards a raw JSON payload to a single Gemini model endpoint."""

    def __init__(self, base_url: str, model: str, timeout: float = 90):
        self.base_url = base_url
        self.model = model
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiUpstream":
        return cls(
            base_url=settings.gemini_base_url,
            model=settings.gemini_model,
            timeout=settings.request_timeout_seconds,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.model}:generateContent"

    async def generate(self, api_key: str, payload: bytes) -> UpstreamResult:
        """
        POST payload to generateContent exactly once.

        Args:
            api_key: Google API key, sent as the ``key`` query parameter
            payload: Request body, forwarded byte-for-byte

        Returns:
            UpstreamReply for any HTTP response, UpstreamFailure if the request
            never completed (connection refused, DNS failure, timeout, bad
            base URL, ...)
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.endpoint,
                    params={"key": api_key},
                    headers={"Content-Type": "application/json"},
                    content=payload,
                )
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            reason = _redact(str(exc) or exc.__class__.__name__, api_key)
            logger.error(f"Proxy error to Gemini: {reason}")
            return UpstreamFailure(reason=reason)

        return UpstreamReply(
            status_code=response.status_code,
            content_type=response.headers.get("content-type") or DEFAULT_CONTENT_TYPE,
            body=response.content,
        )
