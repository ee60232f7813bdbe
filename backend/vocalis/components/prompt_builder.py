"""
Prompt construction for command interpretation.

The prompt pins the model to a single JSON object with the fields `type`,
`userInput` and `response`, where `type` is one of MODEL_INTENT_KINDS.
The command is interpolated verbatim.
"""

from __future__ import annotations

from typing import Dict

from vocalis.components.contracts import IntentKind

# Ordered as presented to the model
INTENT_DESCRIPTIONS: Dict[IntentKind, str] = {
    IntentKind.GENERAL: "a factual or conversational question you can answer directly",
    IntentKind.GOOGLE_SEARCH: "the user wants to search something on Google",
    IntentKind.YOUTUBE_SEARCH: "the user wants to search something on YouTube",
    IntentKind.YOUTUBE_PLAY: "the user wants to play a video or song directly",
    IntentKind.GET_TIME: "the user asks for the current time",
    IntentKind.GET_DATE: "the user asks for today's date",
    IntentKind.GET_DAY: "the user asks what day of the week it is",
    IntentKind.GET_MONTH: "the user asks for the current month",
    IntentKind.CALCULATOR_OPEN: "the user wants to open a calculator",
    IntentKind.INSTAGRAM_OPEN: "the user wants to open Instagram",
    IntentKind.FACEBOOK_OPEN: "the user wants to open Facebook",
    IntentKind.WEATHER_SHOW: "the user wants to know the weather",
}

_TEMPLATE = """You are a virtual assistant named {assistant_name} created by {user_name}.
You are not Google. You behave like a voice-enabled assistant.

Your task is to understand the user's natural language input and respond with a JSON object like this:

{{
  "type": "{type_union}",
  "userInput": "<original user input, with your own name removed if the user said it>",
  "response": "<a short spoken response to read out loud to the user>"
}}

Type meanings:
{type_lines}

Rules:
- "type" must be exactly one of the values listed above.
- Keep "response" short and voice-friendly, for example "Sure, playing it now" or "Here's what I found".
- If someone asks who created you, say {user_name}.
- Respond with the JSON object only. No markdown, no code fences, no extra text.

User input: {command}"""


def build_prompt(command: str, assistant_name: str, user_name: str) -> str:
    """Build the interpretation prompt for one command"""
    type_union = "|".join(kind.value for kind in INTENT_DESCRIPTIONS)
    type_lines = "\n".join(
        f'- "{kind.value}": {description}'
        for kind, description in INTENT_DESCRIPTIONS.items()
    )
    # str.format does not re-scan substituted values, so braces in the command stay literal
    return _TEMPLATE.format(
        assistant_name=assistant_name,
        user_name=user_name,
        type_union=type_union,
        type_lines=type_lines,
        command=command,
    )
