"""
Client for the external reasoning endpoint (Gemini generateContent API shape)

The endpoint is treated as unreliable: every failure is reported through
`ReasoningResult.error` instead of being raised, and exactly one request is
made per call.
"""
import time
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel

from vocalis.core.config import get_settings
from vocalis.core.errors import UpstreamError, UpstreamErrorKind
from vocalis.core.logging_config import LoggingConfig
from vocalis.core.metrics import llm_request_duration_seconds, llm_requests_total

logger = LoggingConfig.get_logger(__name__)


class ReasoningResult(BaseModel):
    """Raw model text, or the reason it is unavailable"""
    text: Optional[str] = None
    error: Optional[UpstreamErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def unavailable(cls, kind: UpstreamErrorKind = UpstreamErrorKind.UNAVAILABLE) -> "ReasoningResult":
        return cls(error=kind)


class GeminiClient:
    """
    Client for a generateContent-style endpoint.
    Pass `http_client` to reuse a pooled client (or a mock transport in tests).
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        settings = get_settings()
        self.api_url = api_url if api_url is not None else settings.gemini_api_url
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.timeout = timeout if timeout is not None else settings.llm_timeout_seconds
        self._client = http_client
        self._owns_client = http_client is None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
            )
        return self._client

    def _build_payload(self, prompt: str) -> Dict[str, Any]:
        return {"contents": [{"parts": [{"text": prompt}]}]}

    def _build_headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-goog-api-key"] = self.api_key
        return headers

    @staticmethod
    def _extract_text(data: Any) -> str:
        """Pull candidates[0].content.parts[0].text out of a response body"""
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamError(
                UpstreamErrorKind.UNAVAILABLE,
                f"Unexpected response shape: {type(e).__name__}"
            )
        if not isinstance(text, str):
            raise UpstreamError(UpstreamErrorKind.UNAVAILABLE, "Response text is not a string")
        return text

    async def _post(self, prompt: str) -> str:
        if not self.api_url:
            raise UpstreamError(UpstreamErrorKind.UNAVAILABLE, "Reasoning endpoint is not configured")

        client = self._get_client()
        try:
            response = await client.post(
                self.api_url,
                json=self._build_payload(prompt),
                headers=self._build_headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException:
            raise UpstreamError(
                UpstreamErrorKind.TIMEOUT,
                f"Reasoning request timed out after {self.timeout}s"
            )
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                UpstreamErrorKind.UNAVAILABLE,
                f"HTTP error from reasoning endpoint: {e.response.status_code}"
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise UpstreamError(
                UpstreamErrorKind.UNAVAILABLE,
                f"Error calling reasoning endpoint: {type(e).__name__}"
            )
        except ValueError:
            raise UpstreamError(UpstreamErrorKind.UNAVAILABLE, "Response body is not JSON")

        return self._extract_text(data)

    async def generate(self, prompt: str) -> ReasoningResult:
        """
        Send one prompt and return the raw completion text

        Args:
            prompt: Fully built prompt

        Returns:
            ReasoningResult with `text` set, or with `error` set on any
            network, timeout, status or body failure
        """
        start_time = time.monotonic()
        try:
            text = await self._post(prompt)
        except UpstreamError as e:
            llm_requests_total.labels(status=e.kind.value).inc()
            logger.warning(
                "Reasoning request failed",
                extra={"error": e.to_dict()},
            )
            return ReasoningResult.unavailable(e.kind)
        finally:
            llm_request_duration_seconds.observe(time.monotonic() - start_time)

        llm_requests_total.labels(status="success").inc()
        logger.debug("Reasoning request succeeded", extra={"response_chars": len(text)})
        return ReasoningResult(text=text)

    async def close(self):
        """Close the HTTP client if this instance created it"""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None


# Global client instance
_gemini_client: Optional[GeminiClient] = None


def get_gemini_client() -> GeminiClient:
    """Get global reasoning client instance"""
    global _gemini_client
    if _gemini_client is None:
        _gemini_client = GeminiClient()
    return _gemini_client
