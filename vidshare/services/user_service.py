# File: vidshare/services/user_service.py

"""
User directory: owns user records.

Username and email are unique at the storage layer, so a create or update
that loses a race against another request still ends in a ValidationError
instead of a duplicate row.
"""

import logging
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from vidshare.core.exceptions import NotFoundError, ValidationError
from vidshare.core.security import PasswordHasher, TokenIssuer
from vidshare.models.user import User

logger = logging.getLogger(__name__)

# Fields a user may change on their own record
UPDATABLE_FIELDS = ("email", "password", "username", "channel_description", "avatar", "cover")
REQUIRED_FIELDS = ("email", "password", "username")


class UserDirectory:
    def __init__(self, db: Session, hasher: PasswordHasher, issuer: TokenIssuer):
        self.db = db
        self.hasher = hasher
        self.issuer = issuer

    # ---------- LOOKUPS ----------

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def find_by_username(self, username: str) -> Optional[User]:
        return self.db.scalars(select(User).where(User.username == username)).first()

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.scalars(select(User).where(User.email == email)).first()

    # ---------- WRITES ----------

    def create_user(self, fields: dict[str, Any]) -> User:
        """
        Create a user from {username, email, password[, avatar, cover,
        channel_description]}. The password is stored as a digest.

        Raises:
            ValidationError: username or email already taken
        """
        user = User(
            username=fields["username"],
            email=fields["email"],
            password_digest=self.hasher.hash(fields["password"]),
            avatar=fields.get("avatar"),
            cover=fields.get("cover"),
            channel_description=fields.get("channel_description"),
            subscribers_count=0,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Create lost a uniqueness race for username={fields['username']!r}")
            raise self._duplicate_error(fields.get("username"))

        self.db.refresh(user)
        logger.info(f"Created user {user.id} ({user.username})")
        return user

    def update_user(self, current_user: User, fields: dict[str, Any]) -> User:
        """
        Apply a partial update: only keys present in `fields` are replaced.
        A new password is hashed before it is stored.

        Raises:
            NotFoundError: the user no longer exists
            ValidationError: null for a required field, or email/username taken
        """
        # reload from the database; the session may still hold a deleted row
        user = self.db.get(User, current_user.id, populate_existing=True)
        if user is None:
            raise NotFoundError(user_id=current_user.id)

        for name in REQUIRED_FIELDS:
            if name in fields and fields[name] is None:
                raise ValidationError(f"{name} cannot be empty", field=name)

        for name, value in fields.items():
            if name not in UPDATABLE_FIELDS:
                continue
            if name == "password":
                user.password_digest = self.hasher.hash(value)
            else:
                setattr(user, name, value)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Update of user {current_user.id} hit a uniqueness constraint")
            raise self._duplicate_error(fields.get("username"), exclude_id=current_user.id)

        self.db.refresh(user)
        logger.info(f"Updated user {user.id}: {sorted(k for k in fields if k in UPDATABLE_FIELDS)}")
        return user

    def create_token(self, claims: dict) -> str:
        return self.issuer.issue(claims)

    # ---------- HELPERS ----------

    def _duplicate_error(
        self,
        username: Optional[str],
        exclude_id: Optional[int] = None,
    ) -> ValidationError:
        if username is not None:
            holder = self.find_by_username(username)
            if holder is not None and holder.id != exclude_id:
                return ValidationError("Username already exists", field="username")
        return ValidationError("Email already exists", field="email")
