# File: vidshare/schemas/user.py

from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic.networks import validate_email

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def _check_password(v: Optional[str]) -> Optional[str]:
    if v is not None and len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
    return v


def _check_email(v: Optional[str]) -> Optional[str]:
    """
    Reject malformed addresses but keep the address exactly as sent;
    lookups by email are exact matches.
    """
    if v is None:
        return v
    _, normalized = validate_email(v)
    if normalized.lower() != v.lower():
        raise ValueError("email must be a bare address")
    return v


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# ---------- REQUESTS ----------

class UserCreate(BaseModel):
    username: str = Field(min_length=1, max_length=255)
    email: str = Field(max_length=255)
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def check_password_length(cls, v):
        return _check_password(v)


class UserLogin(BaseModel):
    email: str
    password: str


class UserUpdate(CamelModel):
    """
    Partial update of the current user. Fields left out of the body are
    left untouched.
    """
    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, min_length=1)
    username: Optional[str] = Field(default=None, min_length=1, max_length=255)
    channel_description: Optional[str] = None
    avatar: Optional[str] = None
    cover: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def check_password_length(cls, v):
        return _check_password(v)


# ---------- RESPONSES ----------

class UserAuth(CamelModel):
    email: str
    token: str
    username: str
    channel_description: Optional[str] = None
    avatar: Optional[str] = None


class UserAuthEnvelope(BaseModel):
    user: UserAuth


class UserProfile(CamelModel):
    email: str
    username: str
    channel_description: Optional[str] = None
    avatar: Optional[str] = None


class UserProfileEnvelope(BaseModel):
    user: UserProfile


class ChannelRead(CamelModel):
    username: str
    email: str
    avatar: Optional[str] = None
    cover: Optional[str] = None
    channel_description: Optional[str] = None
    subscribers_count: int = 0
    is_subscribed: bool = False


class ChannelEnvelope(BaseModel):
    user: ChannelRead


class SubscriptionItem(BaseModel):
    id: int
    username: str
    avatar: Optional[str] = None


class SubscriptionList(BaseModel):
    subscriptions: list[SubscriptionItem]
