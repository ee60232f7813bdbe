"""
Signed session tokens: issuing and verification

Token format: ``<base64url(json claims)>.<hex hmac-sha256 of the first part>``
"""
import base64
import binascii
import hashlib
import hmac
import json
from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel

from vocalis.core.config import get_settings
from vocalis.core.errors import AuthError, AuthErrorKind

SESSION_TTL = timedelta(days=7)


class SessionClaims(BaseModel):
    """Identity bound to a verified token"""
    user_id: str
    issued_at: datetime
    expires_at: datetime


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64decode(data: str) -> bytes:
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


class TokenService:
    """Issues and verifies session tokens. No I/O."""

    def __init__(self, secret_key: Optional[str] = None, ttl: timedelta = SESSION_TTL):
        secret = secret_key if secret_key is not None else get_settings().secret_key
        self._secret = secret.encode("utf-8")
        self.ttl = ttl

    def _sign(self, payload: str) -> str:
        return hmac.new(self._secret, payload.encode("ascii"), hashlib.sha256).hexdigest()

    def issue(self, user_id: str, now: Optional[datetime] = None) -> str:
        """
        Create a token for a user

        Args:
            user_id: Id of the authenticated user
            now: Issue time (default: current UTC time)

        Returns:
            Signed token string
        """
        now = now or datetime.now(timezone.utc)
        claims = {
            "user_id": user_id,
            "iat": int(now.timestamp()),
            "exp": int((now + self.ttl).timestamp()),
        }
        payload = _b64encode(json.dumps(claims, separators=(",", ":")).encode("utf-8"))
        return f"{payload}.{self._sign(payload)}"

    def verify(self, token: Optional[str], now: Optional[datetime] = None) -> SessionClaims:
        """
        Verify a token and return its claims

        Raises:
            AuthError: MISSING if no token, INVALID if the format, signature,
                claims or expiry check fails
        """
        if not token:
            raise AuthError(AuthErrorKind.MISSING)

        payload, sep, signature = token.partition(".")
        if not sep or not payload or not signature:
            raise AuthError(AuthErrorKind.INVALID)

        try:
            expected = self._sign(payload)
        except UnicodeEncodeError:
            raise AuthError(AuthErrorKind.INVALID)
        if not hmac.compare_digest(signature.encode("utf-8"), expected.encode("ascii")):
            raise AuthError(AuthErrorKind.INVALID)

        try:
            claims = json.loads(_b64decode(payload))
        except (binascii.Error, ValueError):
            raise AuthError(AuthErrorKind.INVALID)
        if not isinstance(claims, dict):
            raise AuthError(AuthErrorKind.INVALID)

        user_id = claims.get("user_id")
        issued_at = claims.get("iat")
        expires_at = claims.get("exp")
        if not isinstance(user_id, str) or not user_id:
            raise AuthError(AuthErrorKind.INVALID)
        if not isinstance(issued_at, int) or not isinstance(expires_at, int):
            raise AuthError(AuthErrorKind.INVALID)

        now = now or datetime.now(timezone.utc)
        if expires_at <= int(now.timestamp()):
            raise AuthError(AuthErrorKind.INVALID, "Token expired")

        return SessionClaims(
            user_id=user_id,
            issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc),
        )


_token_service: Optional[TokenService] = None


def get_token_service() -> TokenService:
    """Get global token service bound to the configured secret"""
    global _token_service
    if _token_service is None:
        _token_service = TokenService()
    return _token_service
