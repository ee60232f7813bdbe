"""
CommandInterpreter: session token + command text -> AssistantIntent.

Order of steps: verify token, load identity, throttle, build prompt, call the
reasoning endpoint, normalize. Only AuthError escapes; upstream, parse and
throttle failures all come back as well-formed intents.
"""

from __future__ import annotations

from typing import Optional

from vocalis.components.contracts import AssistantIntent, IntentKind
from vocalis.components.prompt_builder import build_prompt
from vocalis.components.response_normalizer import normalize_with_source
from vocalis.components.throttle import CommandThrottle
from vocalis.core.errors import AuthError, AuthErrorKind, ThrottleRejected
from vocalis.core.gemini_client import GeminiClient, ReasoningResult
from vocalis.core.logging_config import LoggingConfig
from vocalis.core.metrics import intents_total
from vocalis.services.token_service import TokenService
from vocalis.services.user_service import UserIdentity, UserService

logger = LoggingConfig.get_logger(__name__)


class CommandInterpreter:
    def __init__(
        self,
        token_service: TokenService,
        user_service: UserService,
        reasoning_client: GeminiClient,
        throttle: Optional[CommandThrottle] = None,
    ):
        self.token_service = token_service
        self.user_service = user_service
        self.reasoning_client = reasoning_client
        self.throttle = throttle

    def resolve_identity(self, session_token: Optional[str]) -> UserIdentity:
        """
        Verify a session token and load the bound user

        Raises:
            AuthError: token missing or invalid, or the user no longer exists
        """
        claims = self.token_service.verify(session_token)
        identity = self.user_service.find_by_id(claims.user_id)
        if identity is None:
            raise AuthError(AuthErrorKind.INVALID, "User not found")
        return identity

    async def interpret(self, session_token: Optional[str], command: str) -> AssistantIntent:
        identity = self.resolve_identity(session_token)
        return await self.interpret_for(identity, command)

    async def interpret_for(self, identity: UserIdentity, command: str) -> AssistantIntent:
        """Run the pipeline for an already resolved identity"""
        LoggingConfig.set_context(user_id=identity.id)

        if self.throttle is not None:
            try:
                self.throttle.acquire(identity.id)
            except ThrottleRejected as e:
                logger.info("Command throttled", extra={"error": e.to_dict()})
                intents_total.labels(kind=IntentKind.ERROR.value, source="throttle").inc()
                return AssistantIntent.error(command)

        prompt = build_prompt(
            command,
            assistant_name=identity.effective_assistant_name,
            user_name=identity.name,
        )
        try:
            raw = await self.reasoning_client.generate(prompt)
        except Exception as e:
            logger.error(f"Reasoning client raised unexpectedly: {e}", exc_info=True)
            raw = ReasoningResult.unavailable()
        intent, fell_back = normalize_with_source(raw, command)

        source = "fallback" if fell_back else "model"
        intents_total.labels(kind=intent.kind.value, source=source).inc()
        logger.info("Command interpreted", extra={"intent": intent.kind.value, "intent_source": source})

        self._record_history(identity.id, command)
        return intent

    def _record_history(self, user_id: str, command: str) -> None:
        try:
            self.user_service.append_history(user_id, command)
        except Exception as e:
            # History is auxiliary; the intent is still returned
            logger.warning(f"Failed to record command history: {e}", exc_info=True)
