"""
tests/conftest.py
~~~~~~~~~~~~~~~~~
Shared pytest fixtures.

Every test gets a fresh in-memory SQLite database (StaticPool keeps the one
connection alive for the whole test), its own service graph wired to a
recording push channel, and controllable clocks for the trending window and
the trending cache TTL.
"""

import itertools
import threading
from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.base_class import utcnow
from app.db.session import enable_sqlite_foreign_keys
from app.models.user import User, UserRole
from app.schemas.blog_post import BlogPostCreate
from app.services import Services
from app.services.cache import TTLCache
from app.services.engagement_tracker import EngagementTracker
from app.services.feed_aggregator import FeedAggregator
from app.services.notification_dispatcher import NotificationDispatcher
from app.services.post_store import PostStore
from app.services.push_channel import PushDispatcher
from app.services.user_profiles import UserProfiles


class RecordingPushChannel:
    """Collects published events; raises instead when ``fail`` is set"""

    def __init__(self):
        self.events = []
        self.fail = False
        self._lock = threading.Lock()

    def publish(self, event):
        if self.fail:
            raise ConnectionError("push service unreachable")
        with self._lock:
            self.events.append(event)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeTimer:
    def __init__(self):
        self.value = 1000.0

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


# ──────────────────────────────────────────────────────────── database

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", lambda dbapi_connection, record: enable_sqlite_foreign_keys(dbapi_connection))
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


# ──────────────────────────────────────────────────────────── services

@pytest.fixture
def push_channel():
    return RecordingPushChannel()


@pytest.fixture
def clock():
    return FakeClock(utcnow() + timedelta(seconds=1))


@pytest.fixture
def timer():
    return FakeTimer()


@pytest.fixture
def services(push_channel, clock, timer):
    push = PushDispatcher(push_channel, max_workers=1)
    notifications = NotificationDispatcher(push)
    built = Services(
        push=push,
        notifications=notifications,
        posts=PostStore(notifications),
        engagement=EngagementTracker(notifications),
        feed=FeedAggregator(TTLCache(maxsize=64, ttl_seconds=300, timer=timer), window_days=7, clock=clock),
        profiles=UserProfiles(clock=clock),
    )
    yield built
    built.shutdown()


# ──────────────────────────────────────────────────────────── factories

@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make_user(username=None, role=UserRole.USER, **fields):
        username = username or f"user{next(counter)}"
        user = User(
            username=username,
            email=f"{username}@example.com",
            hashed_password="not-a-real-hash",
            role=role,
            **fields,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_post(db, services):
    def _make_post(author, title="Hello World", content="Some words about something", **fields):
        data = BlogPostCreate(title=title, content=content, **fields)
        return services.posts.create_post(db, author.id, data)

    return _make_post
