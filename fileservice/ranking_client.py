"""HTTP client for the external text-completion collaborator."""

from typing import Optional

import httpx

from common.logging_config import get_logger
from fileservice import config

logger = get_logger(__name__)


class RankingServiceError(Exception):
    """
    Raised when the completion endpoint returns an unusable response.
    """
    pass


class TextRankingClient:
    """
    Async client for an OpenAI-compatible chat completions endpoint.

    An instance without an API key is "unconfigured": callers must check
    `configured` and use their deterministic fallback instead.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = config.OPENAI_API_KEY if api_key is None else api_key
        self.base_url = (base_url or config.OPENAI_API_BASE).rstrip('/')
        self.model = model or config.OPENAI_MODEL
        self.timeout = config.RANKING_TIMEOUT_SECONDS if timeout is None else timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def complete(self, prompt: str) -> str:
        """
        Send one prompt and return the completion text.

        Args:
            prompt: User message content

        Returns:
            Stripped completion text (may be empty)

        Raises:
            RankingServiceError: If the client is unconfigured or the body is malformed
            httpx.HTTPError: On transport errors, timeouts and non-2xx statuses
        """
        if not self.configured:
            raise RankingServiceError("Text ranking collaborator is not configured")

        client = self._ensure_client()
        response = await client.post(
            "/chat/completions",
            json={
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": 0,
            },
        )
        response.raise_for_status()

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise RankingServiceError(f"Malformed completion response: {e}") from e

        logger.debug(f"Completion received ({len(content or '')} chars) from {self.base_url}")
        return (content or "").strip()
