# File: vidshare/services/subscription_service.py

"""
Subscription graph: the "subscriber subscribes to channel" relation.

Every mutation keeps the channel's denormalized subscribers_count in step
with the edges. Counter changes are issued as SQL expressions so that
concurrent requests never overwrite each other's increments.
"""

import logging

from sqlalchemy import case, delete, exists, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from vidshare.core.exceptions import InvalidOperationError, NotFoundError
from vidshare.models.subscription import Subscription
from vidshare.models.user import User

logger = logging.getLogger(__name__)


class SubscriptionGraph:
    def __init__(self, db: Session):
        self.db = db

    def subscribe(self, subscriber_id: int, channel_id: int) -> User:
        """
        Add the subscriber -> channel edge and bump the channel's counter.
        Subscribing again to the same channel changes nothing.

        Returns:
            The channel user, reloaded after the change.

        Raises:
            InvalidOperationError: subscriber and channel are the same user
            NotFoundError: subscriber or channel does not exist
        """
        channel = self._get_channel(subscriber_id, channel_id)

        if self.is_subscribed(subscriber_id, channel_id):
            return channel

        self.db.add(Subscription(subscriber_id=subscriber_id, channel_id=channel_id))
        self.db.execute(
            update(User)
            .where(User.id == channel_id)
            .values(subscribers_count=User.subscribers_count + 1)
            .execution_options(synchronize_session=False)
        )
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            # only a lost race against an identical subscribe is harmless
            if not self.is_subscribed(subscriber_id, channel_id):
                raise
            logger.warning(f"Concurrent subscribe {subscriber_id} -> {channel_id}, keeping existing edge")
        else:
            logger.info(f"User {subscriber_id} subscribed to channel {channel_id}")

        self.db.refresh(channel)
        return channel

    def unsubscribe(self, subscriber_id: int, channel_id: int) -> User:
        """
        Remove the subscriber -> channel edge if there is one. The counter
        is only decremented when an edge was actually removed, and never
        drops below zero.

        Raises:
            InvalidOperationError: subscriber and channel are the same user
            NotFoundError: subscriber or channel does not exist
        """
        channel = self._get_channel(subscriber_id, channel_id)

        result = self.db.execute(
            delete(Subscription)
            .where(
                Subscription.subscriber_id == subscriber_id,
                Subscription.channel_id == channel_id,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount:
            self.db.execute(
                update(User)
                .where(User.id == channel_id)
                .values(
                    subscribers_count=case(
                        (User.subscribers_count > 0, User.subscribers_count - 1),
                        else_=0,
                    )
                )
                .execution_options(synchronize_session=False)
            )
            logger.info(f"User {subscriber_id} unsubscribed from channel {channel_id}")
        self.db.commit()

        self.db.refresh(channel)
        return channel

    def is_subscribed(self, subscriber_id: int, channel_id: int) -> bool:
        stmt = select(
            exists().where(
                Subscription.subscriber_id == subscriber_id,
                Subscription.channel_id == channel_id,
            )
        )
        return bool(self.db.scalar(stmt))

    def list_subscriptions(self, user_id: int) -> list[dict]:
        """
        Channels `user_id` is subscribed to, oldest subscription first,
        as {id, username, avatar}.
        """
        stmt = (
            select(User.id, User.username, User.avatar)
            .join(Subscription, Subscription.channel_id == User.id)
            .where(Subscription.subscriber_id == user_id)
            .order_by(Subscription.id)
        )
        return [
            {"id": row.id, "username": row.username, "avatar": row.avatar}
            for row in self.db.execute(stmt)
        ]

    def _get_channel(self, subscriber_id: int, channel_id: int) -> User:
        if subscriber_id == channel_id:
            raise InvalidOperationError("Users cannot subscribe to themselves")
        if self.db.get(User, subscriber_id) is None:
            raise NotFoundError("Subscriber not found", user_id=subscriber_id)
        channel = self.db.get(User, channel_id)
        if channel is None:
            raise NotFoundError("Channel not found", user_id=channel_id)
        return channel
