"""
Conversion of untrusted model output into an AssistantIntent.

Decode-or-default: any output that does not satisfy the intent contract is
replaced by a `general` fallback intent. `normalize` never raises.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Tuple, Union

from vocalis.components.contracts import (FALLBACK_RESPONSE, AssistantIntent,
                                          IntentKind, is_model_kind)
from vocalis.core.errors import ParseError
from vocalis.core.gemini_client import ReasoningResult
from vocalis.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)

REQUIRED_FIELDS = ("type", "userInput", "response")

_LEADING_FENCE = re.compile(r"^\s*```[ \t]*(?:json)?[ \t]*\r?\n?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\r?\n?[ \t]*```\s*$")


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ``` / ```json fence and outer whitespace"""
    text = _LEADING_FENCE.sub("", text, count=1)
    text = _TRAILING_FENCE.sub("", text, count=1)
    return text.strip()


def decode_intent(text: str) -> Dict[str, str]:
    """
    Parse cleaned model text into the three contract fields

    Raises:
        ParseError: text is not a JSON object with string `type`, `userInput`
            and `response`, or `type` is not a model-selectable kind
    """
    try:
        payload: Any = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise ParseError("Model output is not valid JSON", metadata={"reason": str(e)[:200]})

    if not isinstance(payload, dict):
        raise ParseError("Model output is not a JSON object", metadata={"json_type": type(payload).__name__})

    missing = [name for name in REQUIRED_FIELDS if name not in payload]
    if missing:
        raise ParseError("Model output is missing fields", metadata={"missing": missing})

    wrong_type = [name for name in REQUIRED_FIELDS if not isinstance(payload[name], str)]
    if wrong_type:
        raise ParseError("Model output fields are not strings", metadata={"fields": wrong_type})

    if not is_model_kind(payload["type"]):
        raise ParseError("Model output has unknown intent type", metadata={"type": payload["type"][:64]})

    return {name: payload[name] for name in REQUIRED_FIELDS}


def normalize_with_source(
    raw: Union[ReasoningResult, str, None], original_command: str
) -> Tuple[AssistantIntent, bool]:
    """Like `normalize`, also reporting whether the fallback intent was used"""
    if isinstance(raw, ReasoningResult):
        if not raw.ok:
            return AssistantIntent.fallback(original_command), True
        raw = raw.text

    text = raw if isinstance(raw, str) else ""
    cleaned = strip_code_fences(text)

    try:
        fields = decode_intent(cleaned)
    except ParseError as e:
        logger.info(
            "Falling back to general intent",
            extra={"error": e.to_dict()},
        )
        intent = AssistantIntent(
            kind=IntentKind.GENERAL,
            user_input=original_command,
            response=cleaned or FALLBACK_RESPONSE,
        )
        return intent, True

    intent = AssistantIntent(
        kind=IntentKind(fields["type"]),
        user_input=fields["userInput"],
        response=fields["response"],
    )
    return intent, False


def normalize(raw: Union[ReasoningResult, str, None], original_command: str) -> AssistantIntent:
    """
    Turn raw reasoning output into a contract-conforming intent

    Args:
        raw: Result of the reasoning client, or plain model text
        original_command: Command text as submitted by the user

    Returns:
        The parsed intent, or a `general` fallback intent
    """
    intent, _ = normalize_with_source(raw, original_command)
    return intent
