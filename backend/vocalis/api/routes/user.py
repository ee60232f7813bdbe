"""
User profile and assistant command routes
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from vocalis.components.command_interpreter import CommandInterpreter
from vocalis.core.auth import get_session_claims, get_session_token
from vocalis.core.database import get_db
from vocalis.core.errors import AuthError
from vocalis.core.gemini_client import get_gemini_client
from vocalis.core.logging_config import LoggingConfig
from vocalis.services.token_service import SessionClaims, get_token_service
from vocalis.services.user_service import UserService

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(prefix="/api/user", tags=["user"])


class UpdateAssistantRequest(BaseModel):
    """Assistant persona update"""
    assistant_name: Optional[str] = Field(default=None, alias="assistantName", max_length=255)
    image_url: Optional[str] = Field(default=None, alias="imageUrl", max_length=1024)


class AskRequest(BaseModel):
    """Command submitted to the assistant"""
    command: str = Field(..., max_length=2000)


def get_command_interpreter(request: Request, db: Session = Depends(get_db)) -> CommandInterpreter:
    """Build the pipeline from process-scoped handles stored on the app"""
    state = request.app.state
    return CommandInterpreter(
        token_service=get_token_service(),
        user_service=UserService(db),
        reasoning_client=getattr(state, "reasoning_client", None) or get_gemini_client(),
        throttle=getattr(state, "command_throttle", None),
    )


@router.get("/current")
async def get_current_user(
    claims: SessionClaims = Depends(get_session_claims),
    db: Session = Depends(get_db)
):
    """Get the signed-in user's profile"""
    identity = UserService(db).find_by_id(claims.user_id)
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return identity.model_dump(by_alias=True, mode="json")


@router.post("/update")
async def update_assistant(
    request: UpdateAssistantRequest,
    claims: SessionClaims = Depends(get_session_claims),
    db: Session = Depends(get_db)
):
    """Update assistant name and avatar URL"""
    identity = UserService(db).update_assistant(
        claims.user_id,
        assistant_name=request.assistant_name,
        assistant_image=request.image_url,
    )
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return identity.model_dump(by_alias=True, mode="json")


@router.post("/asktoassistant")
async def ask_to_assistant(
    request: AskRequest,
    token: Optional[str] = Depends(get_session_token),
    interpreter: CommandInterpreter = Depends(get_command_interpreter),
):
    """Interpret a command; returns {type, userInput, response}"""
    try:
        intent = await interpreter.interpret(token, request.command)
    except AuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
        )
    return intent.to_wire()
