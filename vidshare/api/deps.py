# File: vidshare/api/deps.py

import logging
from collections.abc import Generator
from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from vidshare.core.exceptions import InvalidTokenError
from vidshare.core.security import PasswordHasher, TokenIssuer
from vidshare.db.session import SessionLocal
from vidshare.models.user import User
from vidshare.services.subscription_service import SubscriptionGraph
from vidshare.services.user_service import UserDirectory

logger = logging.getLogger(__name__)

# Bearer token extractor; a missing header is not an error here,
# get_current_user decides whether the endpoint needs one.
bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides a SQLAlchemy session.

    Usage in route functions:
        db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher()


@lru_cache
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer()


def get_user_directory(
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> UserDirectory:
    return UserDirectory(db, hasher, issuer)


def get_subscription_graph(db: Session = Depends(get_db)) -> SubscriptionGraph:
    return SubscriptionGraph(db)


def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    issuer: TokenIssuer = Depends(get_token_issuer),
    directory: UserDirectory = Depends(get_user_directory),
) -> Optional[User]:
    """
    Resolve the bearer token to a user, or None for anonymous requests.
    Invalid or expired tokens, and tokens for users that no longer exist,
    count as anonymous.
    """
    if credentials is None:
        return None

    try:
        claims = issuer.verify(credentials.credentials)
    except InvalidTokenError:
        return None

    user_id = claims.get("userId")
    if not isinstance(user_id, int):
        logger.warning("Access token without a usable userId claim")
        return None

    return directory.find_by_id(user_id)


def get_current_user(
    user: Optional[User] = Depends(get_current_user_optional),
) -> User:
    """Same as get_current_user_optional, but anonymous requests get a 401."""
    if user is None:
        raise InvalidTokenError("Not authenticated")
    return user


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    return credentials.credentials if credentials else None
