"""
Identity & Token Service - login and profile lookup.
"""

import logging
from typing import Tuple

from app.core.auth import create_access_token, dummy_password_hash, verify_password
from app.core.exceptions import InvalidCredentials, NotFound
from app.models.domain import User
from app.repositories.base import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, users: UserRepository):
        self.users = users

    def authenticate(self, username_or_email: str, password: str) -> Tuple[User, str]:
        """
        Check credentials and issue a token.

        Unknown users and wrong passwords raise the same InvalidCredentials,
        and both paths run one bcrypt verification.
        """
        user = self.users.get_by_login(username_or_email)
        if user is None:
            verify_password(password, dummy_password_hash())
            logger.info("Failed login for unknown identity")
            raise InvalidCredentials()

        if not verify_password(password, user.password_hash):
            logger.info("Failed login for user_id=%s", user.id)
            raise InvalidCredentials()

        token = create_access_token(user)
        logger.info("User %s (id=%s, role=%s) logged in", user.username, user.id, user.role.value)
        return user, token

    def get_profile(self, user_id: int) -> User:
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFound("User not found")
        return user
