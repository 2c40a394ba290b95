# app/services/engagement_tracker.py

"""
Presence toggles between users and posts (likes, bookmarks, reactions) and
between users (follows).

Every toggle is check-then-write, so two concurrent requests from the same
user can both see "absent" and both insert. The unique constraints on the
engagement tables reject the second insert; when that happens the unit of
work is rolled back and the current state is read back and returned.
"""

import logging
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import InvalidArgumentError, NotFoundError
from app.crud import crud_blog_post, crud_blog_post_like, crud_bookmark, crud_follow, crud_reaction, crud_user
from app.models.blog_post import BlogPost
from app.models.notification import NotificationType
from app.models.reaction import ReactionType
from app.schemas.reaction import ReactionSummary
from app.services.notification_dispatcher import NotificationDispatcher
from app.services.post_mapper import summarize_reactions
from app.utils.enums import parse_choice

logger = logging.getLogger(__name__)


class EngagementTracker:
    def __init__(self, notifier: NotificationDispatcher):
        self.notifier = notifier

    def toggle_reaction(self, db: Session, user_id: int, post_id: int, reaction_type) -> ReactionSummary:
        """
        Apply one reaction click.

        No reaction yet: add it and notify the author. Same type again:
        remove it. Different type: switch to the new type, without a new
        notification.
        """
        parsed_type = parse_choice(ReactionType, reaction_type, "reaction type")
        post = self._get_post_or_404(db, post_id)

        def apply() -> None:
            existing = crud_reaction.get_user_reaction(db, user_id, post_id)
            if existing is None:
                crud_reaction.create_reaction(db, user_id, post_id, parsed_type)
                self.notifier.notify(
                    db,
                    recipient_id=post.author_id,
                    actor_id=user_id,
                    notification_type=NotificationType.REACTION,
                    message=f"{self._username(db, user_id)} reacted {parsed_type.value} to your post",
                    reference_id=post_id,
                )
            elif existing.type == parsed_type:
                crud_reaction.delete_reaction(db, existing)
            else:
                crud_reaction.update_reaction_type(db, existing, parsed_type)

        self._run_toggle(db, apply, f"reaction by user {user_id} on post {post_id}")
        return self.get_reactions(db, post_id, user_id)

    def get_reactions(self, db: Session, post_id: int, caller_id: Optional[int] = None) -> ReactionSummary:
        self._get_post_or_404(db, post_id)
        return summarize_reactions(crud_reaction.get_post_reactions(db, post_id), caller_id)

    def toggle_like(self, db: Session, user_id: int, post_id: int) -> bool:
        self._get_post_or_404(db, post_id)

        def apply() -> None:
            like = crud_blog_post_like.get_blog_post_like(db, user_id, post_id)
            if like is None:
                crud_blog_post_like.create_blog_post_like(db, user_id, post_id)
            else:
                crud_blog_post_like.delete_blog_post_like(db, like)

        self._run_toggle(db, apply, f"like by user {user_id} on post {post_id}")
        return crud_blog_post_like.get_blog_post_like(db, user_id, post_id) is not None

    def toggle_bookmark(self, db: Session, user_id: int, post_id: int) -> bool:
        self._get_post_or_404(db, post_id)

        def apply() -> None:
            bookmark = crud_bookmark.get_bookmark(db, user_id, post_id)
            if bookmark is None:
                crud_bookmark.create_bookmark(db, user_id, post_id)
            else:
                crud_bookmark.delete_bookmark(db, bookmark)

        self._run_toggle(db, apply, f"bookmark by user {user_id} on post {post_id}")
        return crud_bookmark.get_bookmark(db, user_id, post_id) is not None

    def toggle_follow(self, db: Session, follower_id: int, following_id: int) -> bool:
        if follower_id == following_id:
            raise InvalidArgumentError("You cannot follow yourself.")
        if crud_user.get_user(db, following_id) is None:
            raise NotFoundError("User not found.")

        def apply() -> None:
            follow = crud_follow.get_follow(db, follower_id, following_id)
            if follow is None:
                crud_follow.create_follow(db, follower_id, following_id)
                self.notifier.notify(
                    db,
                    recipient_id=following_id,
                    actor_id=follower_id,
                    notification_type=NotificationType.FOLLOW,
                    message=f"{self._username(db, follower_id)} started following you",
                )
            else:
                crud_follow.delete_follow(db, follow)

        self._run_toggle(db, apply, f"follow {follower_id} -> {following_id}")
        return crud_follow.get_follow(db, follower_id, following_id) is not None

    def _run_toggle(self, db: Session, apply: Callable[[], None], description: str) -> None:
        try:
            apply()
            db.commit()
        except IntegrityError as e:
            # A concurrent request won the race; the caller re-reads the state it left behind
            db.rollback()
            logger.warning(f"Constraint conflict on {description}, returning current state: {str(e.orig)}")
        except Exception as e:
            db.rollback()
            logger.error(f"Error toggling {description}: {str(e)}")
            raise

    def _get_post_or_404(self, db: Session, post_id: int) -> BlogPost:
        post = crud_blog_post.get_blog_post(db, post_id)
        if post is None:
            raise NotFoundError("Post not found.")
        return post

    def _username(self, db: Session, user_id: int) -> str:
        user = crud_user.get_user(db, user_id)
        return user.username if user else "Someone"
