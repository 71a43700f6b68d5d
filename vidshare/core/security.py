# File: vidshare/core/security.py

"""
Security helpers for the vidshare API.

PasswordHasher turns plaintext passwords into salted bcrypt digests and
checks them at login. TokenIssuer signs and verifies the JWT access tokens
that carry the user id ({"userId": ...}) between requests.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from vidshare.core.config import settings
from vidshare.core.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)


ALGORITHM = settings.algorithm
ACCESS_TOKEN_EXPIRE_MINUTES = settings.access_token_expire_minutes
SECRET_KEY = settings.secret_key


class PasswordHasher:
    def __init__(self, rounds: int = settings.bcrypt_rounds):
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        digest = bcrypt.hashpw(plaintext.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds))
        return digest.decode("utf-8")

    def verify(self, plaintext: str, digest: str) -> bool:
        """
        Check a plaintext password against a stored digest.

        A digest that bcrypt cannot parse simply fails to match.
        """
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), digest.encode("utf-8"))
        except ValueError:
            return False


class TokenIssuer:
    def __init__(
        self,
        secret: str = SECRET_KEY,
        algorithm: str = ALGORITHM,
        expire_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES,
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, claims: dict, expires_delta: Optional[timedelta] = None) -> str:
        """
        Sign `claims` into a JWT that expires after `expires_delta`
        (defaults to ACCESS_TOKEN_EXPIRE_MINUTES).
        """
        now = datetime.now(timezone.utc)
        to_encode: dict[str, Any] = claims.copy()
        to_encode["iat"] = now
        to_encode["exp"] = now + (expires_delta or timedelta(minutes=self.expire_minutes))
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> dict:
        """
        Decode a token and return its claims.

        Raises:
            InvalidTokenError: expired, bad signature or not a JWT at all
        """
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            logger.warning("Rejected expired access token")
            raise InvalidTokenError("Token has expired")
        except JWTError as e:
            logger.warning(f"Rejected access token: {e}")
            raise InvalidTokenError(f"Invalid token: {e}")
