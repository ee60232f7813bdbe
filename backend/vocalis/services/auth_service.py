"""
Authentication service for signup and signin
"""
from typing import Optional, Tuple

import bcrypt
from sqlalchemy.orm import Session

from vocalis.core.logging_config import LoggingConfig
from vocalis.models.user import User
from vocalis.services.token_service import TokenService, get_token_service
from vocalis.services.user_service import UserIdentity

logger = LoggingConfig.get_logger(__name__)

# bcrypt only uses the first 72 bytes; newer releases reject longer input
BCRYPT_MAX_BYTES = 72


class AuthService:
    """Service for account creation and credential checks"""

    def __init__(self, db: Session, token_service: Optional[TokenService] = None):
        self.db = db
        self.token_service = token_service or get_token_service()

    def register_user(self, name: str, email: str, password: str) -> Tuple[UserIdentity, str]:
        """
        Register a new user

        Args:
            name: Display name
            email: Email address (stored lower-cased)
            password: Plain text password

        Returns:
            (created identity, session token)

        Raises:
            ValueError: If the email is already registered
        """
        email = self._normalize_email(email)
        if self.db.query(User).filter(User.email == email).first():
            raise ValueError("User already exists")

        user = User(
            name=name.strip(),
            email=email,
            password_hash=self._hash_password(password),
            history=[],
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"Registered new user: {user.id}")
        return UserIdentity.model_validate(user), self.token_service.issue(user.id)

    def authenticate(self, email: str, password: str) -> Optional[Tuple[UserIdentity, str]]:
        """
        Check credentials

        Returns:
            (identity, session token) if successful, None otherwise
        """
        user = self.db.query(User).filter(User.email == self._normalize_email(email)).first()
        if not user:
            logger.warning("Authentication failed: unknown email")
            return None

        if not self._verify_password(password, user.password_hash):
            logger.warning(f"Authentication failed: invalid password for user {user.id}")
            return None

        logger.info(f"User {user.id} authenticated successfully")
        return UserIdentity.model_validate(user), self.token_service.issue(user.id)

    @staticmethod
    def _normalize_email(email: str) -> str:
        return email.strip().lower()

    def _hash_password(self, password: str) -> str:
        """Hash a password using bcrypt"""
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password.encode('utf-8')[:BCRYPT_MAX_BYTES], salt)
        return hashed.decode('utf-8')

    def _verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a password against a hash"""
        return bcrypt.checkpw(password.encode('utf-8')[:BCRYPT_MAX_BYTES], password_hash.encode('utf-8'))
