"""
Contract models for the command pipeline.

`IntentKind` is the closed set of actions a downstream executor may receive.
Every `AssistantIntent` leaving this package carries one of these kinds.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field


class IntentKind(str, Enum):
    GENERAL = "general"
    GOOGLE_SEARCH = "google-search"
    YOUTUBE_SEARCH = "youtube-search"
    YOUTUBE_PLAY = "youtube-play"
    GET_TIME = "get-time"
    GET_DATE = "get-date"
    GET_DAY = "get-day"
    GET_MONTH = "get-month"
    CALCULATOR_OPEN = "calculator-open"
    INSTAGRAM_OPEN = "instagram-open"
    FACEBOOK_OPEN = "facebook-open"
    WEATHER_SHOW = "weather-show"
    # Produced locally (throttle, client failures), never offered to the model
    ERROR = "error"


MODEL_INTENT_KINDS: FrozenSet[IntentKind] = frozenset(
    kind for kind in IntentKind if kind is not IntentKind.ERROR
)

FALLBACK_RESPONSE = "Sorry, I'm having trouble answering right now. Please try again."
THROTTLED_RESPONSE = "Please wait a moment before sending another request."


def is_model_kind(value: Any) -> bool:
    """True when `value` names a kind the model is allowed to choose"""
    if not isinstance(value, str):
        return False
    try:
        return IntentKind(value) in MODEL_INTENT_KINDS
    except ValueError:
        return False


class AssistantIntent(BaseModel):
    """Structured result of one command: what to do and what to say"""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    kind: IntentKind = Field(..., alias="type")
    user_input: str = Field(..., alias="userInput")
    response: str

    @classmethod
    def fallback(cls, user_input: str, response: Optional[str] = None) -> "AssistantIntent":
        return cls(
            kind=IntentKind.GENERAL,
            user_input=user_input,
            response=response or FALLBACK_RESPONSE,
        )

    @classmethod
    def error(cls, user_input: str, response: str = THROTTLED_RESPONSE) -> "AssistantIntent":
        return cls(kind=IntentKind.ERROR, user_input=user_input, response=response)

    def to_wire(self) -> dict:
        """Serialize with the wire field names (`type`, `userInput`, `response`)"""
        return self.model_dump(by_alias=True, mode="json")
