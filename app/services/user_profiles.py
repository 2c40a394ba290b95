# app/services/user_profiles.py

import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.crud import crud_blog_post, crud_follow, crud_user
from app.db.base_class import utcnow
from app.models.user import User
from app.schemas.common import Page, PaginationParams
from app.schemas.user import CreatorAnalytics, ProfileUpdate, TopPost, UserProfile
from app.utils.text import join_skills, split_skills

logger = logging.getLogger(__name__)

SUGGESTED_USERS_COUNT = 5
TOP_POSTS_COUNT = 5
FOLLOWER_GROWTH_DAYS = 30


class UserProfiles:
    """Public profiles, the follow graph as seen from one user, and creator analytics"""

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self.clock = clock

    def to_profile(self, db: Session, user: User, caller_id: Optional[int] = None) -> UserProfile:
        is_followed = False
        if caller_id is not None and caller_id != user.id:
            is_followed = crud_follow.get_follow(db, caller_id, user.id) is not None
        return UserProfile(
            id=user.id,
            username=user.username,
            display_name=user.display_name,
            bio=user.bio,
            profile_picture_url=user.profile_picture_url,
            cover_photo_url=user.cover_photo_url,
            website=user.website,
            location=user.location,
            social_links=user.social_links or {},
            skills=split_skills(user.skills),
            joined_at=user.created_at,
            followers_count=crud_follow.count_followers(db, user.id),
            following_count=crud_follow.count_following(db, user.id),
            posts_count=crud_blog_post.count_published_by_author(db, user.id),
            is_followed_by_current_user=is_followed,
        )

    def get_profile(self, db: Session, user_id: int, caller_id: Optional[int] = None) -> UserProfile:
        return self.to_profile(db, self._get_user_or_404(db, user_id), caller_id)

    def get_profile_by_username(self, db: Session, username: str, caller_id: Optional[int] = None) -> UserProfile:
        user = crud_user.get_user_by_username(db, username)
        if user is None:
            raise NotFoundError("User not found.")
        return self.to_profile(db, user, caller_id)

    def update_profile(self, db: Session, user_id: int, data: ProfileUpdate) -> UserProfile:
        user = self._get_user_or_404(db, user_id)
        fields = data.model_dump(exclude_none=True)
        if "skills" in fields:
            fields["skills"] = join_skills(fields["skills"])
        try:
            for field, value in fields.items():
                setattr(user, field, value)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating profile for user {user_id}: {str(e)}")
            raise
        return self.to_profile(db, user, user_id)

    def update_profile_picture(self, db: Session, user_id: int, image_url: str) -> str:
        return self._set_image(db, user_id, "profile_picture_url", image_url)

    def update_cover_photo(self, db: Session, user_id: int, image_url: str) -> str:
        return self._set_image(db, user_id, "cover_photo_url", image_url)

    def get_followers(self, db: Session, user_id: int, pagination: PaginationParams,
                      caller_id: Optional[int] = None) -> Page[UserProfile]:
        self._get_user_or_404(db, user_id)
        users, total_count = crud_follow.get_followers(db, user_id, skip=pagination.skip, limit=pagination.page_size)
        return self._profile_page(db, users, total_count, pagination, caller_id)

    def get_following(self, db: Session, user_id: int, pagination: PaginationParams,
                      caller_id: Optional[int] = None) -> Page[UserProfile]:
        self._get_user_or_404(db, user_id)
        users, total_count = crud_follow.get_following(db, user_id, skip=pagination.skip, limit=pagination.page_size)
        return self._profile_page(db, users, total_count, pagination, caller_id)

    def get_suggested_users(self, db: Session, user_id: int, count: int = SUGGESTED_USERS_COUNT) -> List[UserProfile]:
        """Most-followed active users that ``user_id`` does not follow yet, never ``user_id`` itself."""
        exclude_ids = crud_follow.get_following_ids(db, user_id) + [user_id]
        users = crud_user.get_most_followed_users(db, exclude_ids=exclude_ids, limit=count)
        return [self.to_profile(db, user, user_id) for user in users]

    def get_creator_analytics(self, db: Session, user_id: int) -> CreatorAnalytics:
        self._get_user_or_404(db, user_id)
        posts = crud_blog_post.get_published_posts_with_engagement(db, user_id)
        growth_since = self.clock() - timedelta(days=FOLLOWER_GROWTH_DAYS)

        ranked = sorted(
            posts,
            key=lambda p: (p.view_count + len(p.reactions) * 3, p.id),
            reverse=True,
        )
        top_posts = [
            TopPost(
                id=post.id,
                title=post.title,
                slug=post.slug,
                view_count=post.view_count,
                reaction_count=len(post.reactions),
                comment_count=len(post.comments),
                created_at=post.created_at,
            )
            for post in ranked[:TOP_POSTS_COUNT]
        ]

        return CreatorAnalytics(
            total_views=sum(post.view_count for post in posts),
            total_reactions=sum(len(post.reactions) for post in posts),
            total_comments=sum(len(post.comments) for post in posts),
            total_followers=crud_follow.count_followers(db, user_id),
            followers_growth_last_30_days=crud_follow.count_followers(db, user_id, since=growth_since),
            top_posts=top_posts,
        )

    def _profile_page(self, db: Session, users: List[User], total_count: int,
                      pagination: PaginationParams, caller_id: Optional[int]) -> Page[UserProfile]:
        return Page[UserProfile](
            items=[self.to_profile(db, user, caller_id) for user in users],
            total_count=total_count,
            page=pagination.page,
            page_size=pagination.page_size,
        )

    def _set_image(self, db: Session, user_id: int, field: str, image_url: str) -> str:
        user = self._get_user_or_404(db, user_id)
        try:
            setattr(user, field, image_url)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating {field} for user {user_id}: {str(e)}")
            raise
        logger.info(f"Updated {field} for user {user_id}")
        return image_url

    def _get_user_or_404(self, db: Session, user_id: int) -> User:
        user = crud_user.get_user(db, user_id)
        if user is None:
            raise NotFoundError("User not found.")
        return user
