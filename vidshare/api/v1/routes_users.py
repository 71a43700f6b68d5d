# File: vidshare/api/v1/routes_users.py

"""
User and subscription routes.

These stay thin: check the request, call the user directory or the
subscription graph, and shape the response. Responses never include
password digests.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from vidshare.api.deps import (
    get_bearer_token,
    get_current_user,
    get_current_user_optional,
    get_password_hasher,
    get_subscription_graph,
    get_user_directory,
)
from vidshare.core.exceptions import NotFoundError, ValidationError
from vidshare.core.security import PasswordHasher
from vidshare.models.user import User
from vidshare.schemas.user import (
    ChannelEnvelope,
    ChannelRead,
    SubscriptionList,
    UserAuth,
    UserAuthEnvelope,
    UserCreate,
    UserLogin,
    UserProfile,
    UserProfileEnvelope,
    UserUpdate,
)
from vidshare.services.auth_service import authenticate_user
from vidshare.services.subscription_service import SubscriptionGraph
from vidshare.services.user_service import UserDirectory

router = APIRouter()


def _auth_envelope(user: User, token: str) -> UserAuthEnvelope:
    return UserAuthEnvelope(
        user=UserAuth(
            email=user.email,
            token=token,
            username=user.username,
            channel_description=user.channel_description,
            avatar=user.avatar,
        )
    )


def _channel_envelope(channel: User, is_subscribed: bool) -> ChannelEnvelope:
    return ChannelEnvelope(
        user=ChannelRead(
            username=channel.username,
            email=channel.email,
            avatar=channel.avatar,
            cover=channel.cover,
            channel_description=channel.channel_description,
            subscribers_count=channel.subscribers_count,
            is_subscribed=is_subscribed,
        )
    )


# ---------- ACCOUNT ----------

@router.post("/users", response_model=UserAuthEnvelope, summary="Register a user")
def create_user(
    payload: UserCreate,
    directory: UserDirectory = Depends(get_user_directory),
):
    if directory.find_by_username(payload.username):
        raise ValidationError("Username already exists", field="username")
    if directory.find_by_email(payload.email):
        raise ValidationError("Email already exists", field="email")

    user = directory.create_user(payload.model_dump())
    token = directory.create_token({"userId": user.id})
    return _auth_envelope(user, token)


@router.post("/users/login", response_model=UserAuthEnvelope, summary="Log in with email and password")
def login(
    payload: UserLogin,
    directory: UserDirectory = Depends(get_user_directory),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    user = authenticate_user(directory, hasher, email=payload.email, password=payload.password)
    token = directory.create_token({"userId": user.id})
    return _auth_envelope(user, token)


@router.get("/user", response_model=UserAuthEnvelope, summary="Current user")
def get_current_user_info(
    user: User = Depends(get_current_user),
    token: Optional[str] = Depends(get_bearer_token),
):
    return _auth_envelope(user, token or "")


@router.patch("/user", response_model=UserProfileEnvelope, summary="Update the current user")
def update_current_user(
    payload: UserUpdate,
    user: User = Depends(get_current_user),
    directory: UserDirectory = Depends(get_user_directory),
):
    fields = payload.model_dump(exclude_unset=True)

    email = fields.get("email")
    if email and email != user.email and directory.find_by_email(email):
        raise ValidationError("Email already exists", field="email")

    username = fields.get("username")
    if username and username != user.username and directory.find_by_username(username):
        raise ValidationError("Username already exists", field="username")

    user = directory.update_user(user, fields)
    return UserProfileEnvelope(
        user=UserProfile(
            email=user.email,
            username=user.username,
            channel_description=user.channel_description,
            avatar=user.avatar,
        )
    )


# ---------- SUBSCRIPTIONS ----------

@router.post("/users/{user_id}/subscribe", response_model=ChannelEnvelope, summary="Subscribe to a channel")
def subscribe(
    user_id: int,
    user: User = Depends(get_current_user),
    graph: SubscriptionGraph = Depends(get_subscription_graph),
):
    channel = graph.subscribe(user.id, user_id)
    return _channel_envelope(channel, is_subscribed=True)


@router.post("/users/{user_id}/unsubscribe", response_model=ChannelEnvelope, summary="Unsubscribe from a channel")
@router.delete("/users/{user_id}/subscribe", response_model=ChannelEnvelope, summary="Unsubscribe from a channel")
def unsubscribe(
    user_id: int,
    user: User = Depends(get_current_user),
    graph: SubscriptionGraph = Depends(get_subscription_graph),
):
    channel = graph.unsubscribe(user.id, user_id)
    return _channel_envelope(channel, is_subscribed=False)


@router.get("/users/{user_id}", response_model=ChannelEnvelope, summary="Public channel profile")
def get_user(
    user_id: int,
    viewer: Optional[User] = Depends(get_current_user_optional),
    directory: UserDirectory = Depends(get_user_directory),
    graph: SubscriptionGraph = Depends(get_subscription_graph),
):
    channel = directory.find_by_id(user_id)
    if channel is None:
        raise NotFoundError(user_id=user_id)

    is_subscribed = False
    if viewer is not None and viewer.id != user_id:
        is_subscribed = graph.is_subscribed(viewer.id, user_id)
    return _channel_envelope(channel, is_subscribed)


@router.get("/users/{user_id}/subscriptions", response_model=SubscriptionList, summary="Channels a user subscribes to")
def get_subscriptions(
    user_id: int,
    graph: SubscriptionGraph = Depends(get_subscription_graph),
):
    return SubscriptionList(subscriptions=graph.list_subscriptions(user_id))
