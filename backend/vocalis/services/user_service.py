"""
Identity store: user lookup and assistant profile updates
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from vocalis.core.logging_config import LoggingConfig
from vocalis.models.user import User

logger = LoggingConfig.get_logger(__name__)

DEFAULT_ASSISTANT_NAME = "Assistant"
MAX_HISTORY_ENTRIES = 100


class UserIdentity(BaseModel):
    """Public view of a user; never carries the password hash"""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str = Field(..., serialization_alias="_id")
    name: str
    email: str
    assistant_name: Optional[str] = Field(default=None, serialization_alias="assistantName")
    assistant_image: Optional[str] = Field(default=None, serialization_alias="assistantImage")
    history: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = Field(default=None, serialization_alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, serialization_alias="updatedAt")

    @property
    def effective_assistant_name(self) -> str:
        return self.assistant_name or DEFAULT_ASSISTANT_NAME


class UserService:
    """Read and update user profiles"""

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def find_by_id(self, user_id: str) -> Optional[UserIdentity]:
        """Resolve a user id to its identity, or None if unknown"""
        user = self.get_user(user_id)
        if user is None:
            return None
        return UserIdentity.model_validate(user)

    def update_assistant(
        self,
        user_id: str,
        assistant_name: Optional[str] = None,
        assistant_image: Optional[str] = None,
    ) -> Optional[UserIdentity]:
        """
        Update the assistant persona of a user

        Args:
            user_id: User ID
            assistant_name: New assistant name (None keeps the current one)
            assistant_image: New avatar URL (None keeps the current one)

        Returns:
            Updated identity, or None if the user does not exist
        """
        user = self.get_user(user_id)
        if user is None:
            return None

        if assistant_name is not None:
            user.assistant_name = assistant_name.strip() or None
        if assistant_image is not None:
            user.assistant_image = assistant_image.strip() or None

        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Updated assistant profile for user {user_id}")
        return UserIdentity.model_validate(user)

    def append_history(self, user_id: str, command: str) -> None:
        """Record a command, keeping the most recent MAX_HISTORY_ENTRIES"""
        user = self.get_user(user_id)
        if user is None:
            return
        user.history.append(command)
        if len(user.history) > MAX_HISTORY_ENTRIES:
            del user.history[:-MAX_HISTORY_ENTRIES]
        self.db.commit()
