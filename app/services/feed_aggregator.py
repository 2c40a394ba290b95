# app/services/feed_aggregator.py

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from sqlalchemy.orm import Session

from app.crud import crud_blog_post, crud_follow
from app.db.base_class import utcnow
from app.schemas.blog_post import BlogPost as BlogPostOut
from app.schemas.common import Page, PaginationParams
from app.services.cache import TTLCache
from app.services.post_mapper import PostEngagement, to_anonymous_post_dto
from app.services.post_store import to_post_page

logger = logging.getLogger(__name__)

DEFAULT_TRENDING_WINDOW_DAYS = 7


@dataclass(frozen=True)
class TrendingSnapshot:
    """A ranked trending page serialized once, with the engagement needed to annotate it per caller"""
    page: Page[BlogPostOut]
    engagement: Dict[int, PostEngagement]

    def for_caller(self, caller_id: Optional[int]) -> Page[BlogPostOut]:
        if caller_id is None:
            return self.page
        return self.page.model_copy(update={
            "items": [self.engagement[post.id].annotate(post, caller_id) for post in self.page.items],
        })


class FeedAggregator:
    """
    Read-only feeds over published posts.

    Trending pages are expensive to rank, so each (page, page_size) result is
    kept in the aggregator's own TTL cache. Within the TTL, repeated calls
    return the same snapshot even if posts or engagement changed meanwhile.
    """

    def __init__(
        self,
        cache: TTLCache,
        window_days: int = DEFAULT_TRENDING_WINDOW_DAYS,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.cache = cache
        self.window_days = window_days
        self.clock = clock

    def get_home_feed(self, db: Session, user_id: int, pagination: PaginationParams) -> Page[BlogPostOut]:
        following_ids = crud_follow.get_following_ids(db, user_id)
        if not following_ids:
            return Page[BlogPostOut](page=pagination.page, page_size=pagination.page_size)

        query = crud_blog_post.posts_by_authors_query(db, following_ids)
        posts, total_count = crud_blog_post.paginate(query, pagination)
        return to_post_page(posts, total_count, pagination, user_id)

    def get_trending(self, db: Session, pagination: PaginationParams,
                     caller_id: Optional[int] = None) -> Page[BlogPostOut]:
        cache_key = f"trending_{pagination.page}_{pagination.page_size}"
        snapshot = self.cache.get(cache_key)
        if snapshot is None:
            logger.info(f"Trending cache miss for {cache_key}")
            snapshot = self._rank_trending(db, pagination)
            self.cache.set(cache_key, snapshot)
        return snapshot.for_caller(caller_id)

    def get_latest(self, db: Session, pagination: PaginationParams,
                   caller_id: Optional[int] = None) -> Page[BlogPostOut]:
        posts, total_count = crud_blog_post.paginate(crud_blog_post.latest_posts_query(db), pagination)
        return to_post_page(posts, total_count, pagination, caller_id)

    def _rank_trending(self, db: Session, pagination: PaginationParams) -> TrendingSnapshot:
        since = self.clock() - timedelta(days=self.window_days)
        posts, total_count = crud_blog_post.paginate(crud_blog_post.trending_posts_query(db, since), pagination)
        page = Page[BlogPostOut](
            items=[to_anonymous_post_dto(post) for post in posts],
            total_count=total_count,
            page=pagination.page,
            page_size=pagination.page_size,
        )
        return TrendingSnapshot(
            page=page,
            engagement={post.id: PostEngagement.from_post(post) for post in posts},
        )
