"""
Authentication dependencies and session cookie helpers
"""
from typing import Optional

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from vocalis.core.config import get_settings
from vocalis.core.errors import AuthError
from vocalis.services.token_service import (SESSION_TTL, SessionClaims,
                                            get_token_service)

# HTTP Bearer security scheme
security = HTTPBearer(auto_error=False)

SESSION_COOKIE = "token"


def get_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """
    Read the session token from the Authorization header or the cookie

    Returns:
        Token string, or None if the request carries none
    """
    if credentials:
        return credentials.credentials
    return request.cookies.get(SESSION_COOKIE)


def get_session_claims(token: Optional[str] = Depends(get_session_token)) -> SessionClaims:
    """
    Require a valid session: return its claims or raise 401
    """
    try:
        return get_token_service().verify(token)
    except AuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
        )


def set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="none" if settings.cookie_secure else "lax",
        path="/",
        max_age=int(SESSION_TTL.total_seconds()),
    )


def clear_session_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        key=SESSION_COOKIE,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="none" if settings.cookie_secure else "lax",
    )
