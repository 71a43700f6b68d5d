# File: vidshare/services/auth_service.py

"""
Authentication service: email + password login.
"""

import logging

from vidshare.core.exceptions import ValidationError
from vidshare.core.security import PasswordHasher
from vidshare.models.user import User
from vidshare.services.user_service import UserDirectory

logger = logging.getLogger(__name__)


def authenticate_user(
    directory: UserDirectory,
    hasher: PasswordHasher,
    *,
    email: str,
    password: str,
) -> User:
    """
    Look up a user by email and check the password against the stored digest.

    Raises:
        ValidationError: unknown email, or password incorrect
    """
    user = directory.find_by_email(email)
    if user is None:
        raise ValidationError("Email does not exist", field="email")

    if not hasher.verify(password, user.password_digest):
        logger.info(f"Failed login for user {user.id}")
        raise ValidationError("Password incorrect", field="password")

    return user
