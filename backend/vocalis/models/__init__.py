"""
SQLAlchemy models
"""
from vocalis.core.database import Base
from vocalis.models.user import User  # noqa: F401

__all__ = ["Base", "User"]
