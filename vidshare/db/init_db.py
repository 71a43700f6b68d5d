"""
Database initialization helpers.

Models are imported so their tables get registered on Base.metadata.
"""

import logging

from sqlalchemy.orm import Session

from vidshare.core.security import PasswordHasher, TokenIssuer
from vidshare.db.session import engine
from vidshare.models.base import Base
from vidshare.models import subscription, user  # noqa: F401
from vidshare.services.user_service import UserDirectory

logger = logging.getLogger(__name__)

DEMO_USER = {
    "username": "ls",
    "email": "ls@example.com",
    "password": "123456",
}


def init_db(bind=engine) -> None:
    """
    Create all tables based on SQLAlchemy models.
    """
    Base.metadata.create_all(bind=bind)


def seed_initial_data(db: Session) -> None:
    """
    Create the demo user if it is not there yet.
    """
    directory = UserDirectory(db, PasswordHasher(), TokenIssuer())
    if directory.find_by_username(DEMO_USER["username"]) or directory.find_by_email(DEMO_USER["email"]):
        return
    directory.create_user(DEMO_USER)
    logger.info("Seeded demo user %r", DEMO_USER["username"])
