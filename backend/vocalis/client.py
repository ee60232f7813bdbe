"""
HTTP client for the Vocalis API

Holds the session token and applies the command throttle locally, so a
rejected command never reaches the server.
"""
from typing import Any, Dict, Optional

import httpx

from vocalis.components.contracts import AssistantIntent, IntentKind
from vocalis.components.throttle import DEFAULT_MIN_INTERVAL_MS, CommandThrottle
from vocalis.core.errors import ThrottleRejected
from vocalis.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)

RATE_LIMITED_RESPONSE = "I'm receiving too many requests. Please wait a moment and try again."
REQUEST_FAILED_RESPONSE = "Sorry, something went wrong. Please try again."

_THROTTLE_KEY = "session"


class ClientError(Exception):
    """Non-command API call failed"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AssistantClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: Optional[str] = None,
        timeout: float = 30.0,
        min_interval_ms: int = DEFAULT_MIN_INTERVAL_MS,
        throttle: Optional[CommandThrottle] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.token = token
        self.throttle = throttle or CommandThrottle(min_interval_ms=min_interval_ms)
        self._client = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    def _headers(self) -> Dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.reason_phrase
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return response.reason_phrase

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = self._client.request(method, path, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            raise ClientError(f"Request to {path} failed: {e}")
        if response.is_error:
            raise ClientError(self._error_message(response), status_code=response.status_code)
        token = response.cookies.get("token")
        if token:
            self.token = token
        return response.json()

    def signup(self, name: str, email: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/api/auth/signup", json={"name": name, "email": email, "password": password})

    def signin(self, email: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/api/auth/signin", json={"email": email, "password": password})

    def logout(self) -> None:
        self._request("GET", "/api/auth/logout")
        self.token = None

    def current_user(self) -> Dict[str, Any]:
        return self._request("GET", "/api/user/current")

    def update_assistant(self, assistant_name: Optional[str] = None, image_url: Optional[str] = None) -> Dict[str, Any]:
        payload = {}
        if assistant_name is not None:
            payload["assistantName"] = assistant_name
        if image_url is not None:
            payload["imageUrl"] = image_url
        return self._request("POST", "/api/user/update", json=payload)

    def ask(self, command: str) -> AssistantIntent:
        """
        Send a command to the assistant

        Never raises: throttling, rate limiting and transport failures come
        back as `error` intents.
        """
        try:
            self.throttle.acquire(_THROTTLE_KEY)
        except ThrottleRejected:
            logger.info("Please wait before sending another request")
            return AssistantIntent.error(command)

        try:
            response = self._client.post(
                "/api/user/asktoassistant",
                json={"command": command},
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            logger.warning(f"Assistant request failed: {e}")
            return AssistantIntent(kind=IntentKind.ERROR, user_input=command, response=REQUEST_FAILED_RESPONSE)

        if response.status_code == 429:
            return AssistantIntent(kind=IntentKind.ERROR, user_input=command, response=RATE_LIMITED_RESPONSE)
        if response.is_error:
            logger.warning(f"Assistant request failed with status {response.status_code}")
            return AssistantIntent(kind=IntentKind.ERROR, user_input=command, response=REQUEST_FAILED_RESPONSE)

        try:
            return AssistantIntent.model_validate(response.json())
        except ValueError as e:
            logger.warning(f"Assistant returned an unreadable intent: {e}")
            return AssistantIntent(kind=IntentKind.ERROR, user_input=command, response=REQUEST_FAILED_RESPONSE)

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
