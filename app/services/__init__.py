# app/services/__init__.py

import logging
from dataclasses import dataclass
from typing import Optional

from app.core.config import Settings
from app.services.cache import TTLCache
from app.services.engagement_tracker import EngagementTracker
from app.services.feed_aggregator import FeedAggregator
from app.services.notification_dispatcher import NotificationDispatcher
from app.services.post_store import PostStore
from app.services.push_channel import HttpPushChannel, LoggingPushChannel, PushChannel, PushDispatcher
from app.services.user_profiles import UserProfiles

logger = logging.getLogger(__name__)


@dataclass
class Services:
    push: PushDispatcher
    notifications: NotificationDispatcher
    posts: PostStore
    engagement: EngagementTracker
    feed: FeedAggregator
    profiles: UserProfiles

    def shutdown(self) -> None:
        self.push.shutdown(wait=True)


def build_services(current: Settings, channel: Optional[PushChannel] = None) -> Services:
    if channel is None:
        if current.PUSH_CHANNEL_URL:
            channel = HttpPushChannel(current.PUSH_CHANNEL_URL, timeout=current.PUSH_CHANNEL_TIMEOUT_SECONDS)
            logger.info(f"Push events will be sent to {current.PUSH_CHANNEL_URL}")
        else:
            channel = LoggingPushChannel()
            logger.warning("PUSH_CHANNEL_URL not set. Push events will only be logged.")

    push = PushDispatcher(channel, max_workers=current.PUSH_WORKERS)
    notifications = NotificationDispatcher(push)
    trending_cache = TTLCache(
        maxsize=current.TRENDING_CACHE_MAXSIZE,
        ttl_seconds=current.TRENDING_CACHE_TTL_SECONDS,
    )
    return Services(
        push=push,
        notifications=notifications,
        posts=PostStore(notifications),
        engagement=EngagementTracker(notifications),
        feed=FeedAggregator(trending_cache, window_days=current.TRENDING_WINDOW_DAYS),
        profiles=UserProfiles(),
    )


__all__ = [
    "Services", "build_services",
    "TTLCache", "PushDispatcher", "NotificationDispatcher",
    "PostStore", "EngagementTracker", "FeedAggregator", "UserProfiles",
]
