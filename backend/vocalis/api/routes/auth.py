"""
Authentication API routes
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from vocalis.core.auth import clear_session_cookie, set_session_cookie
from vocalis.core.database import get_db
from vocalis.core.logging_config import LoggingConfig
from vocalis.services.auth_service import AuthService

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


# Request models
class SignupRequest(BaseModel):
    """User registration request"""
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class SigninRequest(BaseModel):
    """User login request"""
    email: Optional[str] = None
    password: Optional[str] = None


def _require_fields(*values: Optional[str]) -> None:
    if not all(value and value.strip() for value in values):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="All fields required"
        )


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    request: SignupRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    """Register a new user and start a session"""
    _require_fields(request.name, request.email, request.password)

    try:
        identity, token = AuthService(db).register_user(
            name=request.name,
            email=request.email,
            password=request.password,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    set_session_cookie(response, token)
    return identity.model_dump(by_alias=True, mode="json", exclude={"history"})


@router.post("/signin")
async def signin(
    request: SigninRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    """Check credentials and start a session"""
    _require_fields(request.email, request.password)

    result = AuthService(db).authenticate(request.email, request.password)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid credentials"
        )

    identity, token = result
    set_session_cookie(response, token)
    return identity.model_dump(by_alias=True, mode="json", exclude={"history"})


@router.get("/logout")
async def logout(response: Response):
    """Clear the session cookie; tokens are stateless so nothing else is revoked"""
    clear_session_cookie(response)
    return {"message": "Logged out"}
