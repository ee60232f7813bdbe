"""
User model holding credentials and the assistant profile
"""
from datetime import datetime
from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime, String
from sqlalchemy.ext.mutable import MutableList

from vocalis.core.database import Base


def _new_id() -> str:
    return str(uuid4())


class User(Base):
    """User account with its assistant persona"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    assistant_name = Column(String(255), nullable=True)
    assistant_image = Column(String(1024), nullable=True)
    history = Column(MutableList.as_mutable(JSON), nullable=False, default=list)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, assistant_name={self.assistant_name})>"
