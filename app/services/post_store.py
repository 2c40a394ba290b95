# app/services/post_store.py

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import ForbiddenError, InvalidArgumentError, NotFoundError
from app.core.security import Caller
from app.crud import crud_blog_post, crud_bookmark, crud_comment, crud_draft_blog, crud_follow, crud_tag, crud_user
from app.models.blog_post import BlogPost
from app.models.comment import Comment
from app.models.draft_blog import DraftBlog
from app.models.notification import NotificationType
from app.schemas.blog_post import BlogPost as BlogPostOut
from app.schemas.blog_post import BlogPostCreate, BlogPostUpdate, PostImageCreate, SearchResult, UserSearchResult
from app.schemas.blog_post import PostImage as PostImageOut
from app.schemas.comment import Comment as CommentOut
from app.schemas.comment import CommentCreate
from app.schemas.common import Page, PaginationParams
from app.schemas.draft_blog import DraftBlog as DraftBlogOut
from app.schemas.draft_blog import DraftSave
from app.services.notification_dispatcher import NotificationDispatcher
from app.services.post_mapper import to_post_dto
from app.utils.text import calculate_reading_time, generate_slug, normalize_tag, slug_suffix

logger = logging.getLogger(__name__)

FALLBACK_SLUG = "post"
SEARCH_USERS_LIMIT = 10
SEARCH_TAGS_LIMIT = 20


def to_comment_dto(comment: Comment) -> CommentOut:
    user = comment.user
    return CommentOut(
        id=comment.id,
        content=comment.content,
        is_edited=comment.is_edited,
        created_at=comment.created_at,
        user_id=comment.user_id,
        username=user.username if user else "",
        user_display_name=user.display_name if user else None,
        user_profile_picture_url=user.profile_picture_url if user else None,
        parent_comment_id=comment.parent_comment_id,
    )


def build_comment_tree(top_level: List[Comment], replies: List[Comment]) -> List[CommentOut]:
    """Attach replies (at any depth) under their parents; replies keep oldest-first order"""
    children: Dict[int, List[Comment]] = defaultdict(list)
    for reply in replies:
        children[reply.parent_comment_id].append(reply)

    def build(comment: Comment) -> CommentOut:
        node = to_comment_dto(comment)
        node.replies = [build(child) for child in children.get(comment.id, [])]
        return node

    return [build(comment) for comment in top_level]


def to_post_page(posts: List[BlogPost], total_count: int, pagination: PaginationParams,
                 caller_id: Optional[int]) -> Page[BlogPostOut]:
    return Page[BlogPostOut](
        items=[to_post_dto(post, caller_id) for post in posts],
        total_count=total_count,
        page=pagination.page,
        page_size=pagination.page_size,
    )


def ensure_owner(caller: Caller, owner_id: int, action: str) -> None:
    if caller.id != owner_id and not caller.is_admin:
        raise ForbiddenError(f"You can only {action}.")


class PostStore:
    """Blog posts and everything they own: tags, images, comments, plus the author's drafts"""

    def __init__(self, notifier: NotificationDispatcher):
        self.notifier = notifier

    # --- Posts ---

    def create_post(self, db: Session, author_id: int, data: BlogPostCreate) -> BlogPostOut:
        try:
            post = crud_blog_post.create_blog_post(
                db,
                title=data.title,
                content=data.content,
                summary=data.summary,
                slug=self._unique_slug(db, data.title),
                author_id=author_id,
                is_published=not data.is_draft,
                is_draft=data.is_draft,
                category=data.category,
                reading_time_minutes=calculate_reading_time(data.content),
            )
            self._sync_tags(db, post, data.tags)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating blog post for user {author_id}: {str(e)}")
            raise

        logger.info(f"Blog post created successfully. ID: {post.id}, slug: {post.slug}")
        return self.get_post_by_id(db, post.id, author_id)

    def update_post(self, db: Session, caller: Caller, post_id: int, data: BlogPostUpdate) -> BlogPostOut:
        post = self._get_post_or_404(db, post_id)
        ensure_owner(caller, post.author_id, "edit your own posts")

        try:
            post.title = data.title
            post.content = data.content
            post.summary = data.summary
            post.category = data.category
            post.is_draft = data.is_draft
            post.is_published = not data.is_draft
            post.reading_time_minutes = calculate_reading_time(data.content)
            self._sync_tags(db, post, data.tags)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating blog post {post_id}: {str(e)}")
            raise

        logger.info(f"Blog post {post_id} updated by user {caller.id}")
        return self.get_post_by_id(db, post_id, caller.id)

    def delete_post(self, db: Session, caller: Caller, post_id: int) -> None:
        post = self._get_post_or_404(db, post_id)
        ensure_owner(caller, post.author_id, "delete your own posts")

        try:
            crud_blog_post.delete_blog_post(db, post)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error deleting blog post {post_id}: {str(e)}")
            raise
        logger.info(f"Blog post {post_id} deleted by user {caller.id}")

    def get_post_by_id(self, db: Session, post_id: int, caller_id: Optional[int] = None) -> BlogPostOut:
        post = crud_blog_post.get_full_blog_post(db, post_id)
        if post is None:
            raise NotFoundError("Post not found.")
        return to_post_dto(post, caller_id)

    def get_post_by_slug(self, db: Session, slug: str, caller_id: Optional[int] = None) -> BlogPostOut:
        """Reading a post by slug counts as one page view."""
        post = crud_blog_post.get_full_blog_post_by_slug(db, slug)
        if post is None:
            raise NotFoundError("Post not found.")

        try:
            crud_blog_post.increment_view_count(db, post)
            dto = to_post_dto(post, caller_id)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error recording view for post {slug}: {str(e)}")
            raise
        return dto

    def list_posts_by_author(self, db: Session, author_id: int, pagination: PaginationParams,
                             caller_id: Optional[int] = None) -> Page[BlogPostOut]:
        query = crud_blog_post.posts_by_authors_query(db, [author_id])
        posts, total_count = crud_blog_post.paginate(query, pagination)
        return to_post_page(posts, total_count, pagination, caller_id)

    def search_posts(self, db: Session, text: str, pagination: PaginationParams,
                     caller_id: Optional[int] = None) -> Page[BlogPostOut]:
        text = (text or "").strip()
        if not text:
            raise InvalidArgumentError("Search query must not be empty.")
        query = crud_blog_post.search_posts_query(db, text)
        posts, total_count = crud_blog_post.paginate(query, pagination)
        return to_post_page(posts, total_count, pagination, caller_id)

    def full_text_search(self, db: Session, text: str, pagination: PaginationParams) -> SearchResult:
        """
        One query across posts, people and tags.

        Posts also match on tag names and come back most viewed first, one
        page at a time. Users and tags are capped lists, not paginated.
        ``total_results`` adds the full post count to the returned users and tags.
        """
        text = (text or "").strip()
        if not text:
            raise InvalidArgumentError("Search query must not be empty.")

        posts, total_posts = crud_blog_post.paginate(crud_blog_post.full_text_search_query(db, text), pagination)
        users = [
            UserSearchResult(
                id=user.id,
                username=user.username,
                display_name=user.display_name,
                profile_picture_url=user.profile_picture_url,
                followers_count=crud_follow.count_followers(db, user.id),
            )
            for user in crud_user.search_active_users(db, text, limit=SEARCH_USERS_LIMIT)
        ]
        tags = crud_tag.search_tag_names(db, text, limit=SEARCH_TAGS_LIMIT)

        return SearchResult(
            posts=[to_post_dto(post, None) for post in posts],
            users=users,
            tags=tags,
            total_results=total_posts + len(users) + len(tags),
        )

    def list_bookmarked_posts(self, db: Session, user_id: int, pagination: PaginationParams) -> Page[BlogPostOut]:
        post_ids = crud_bookmark.get_bookmarked_post_ids(db, user_id)
        if not post_ids:
            return Page[BlogPostOut](page=pagination.page, page_size=pagination.page_size)
        query = crud_blog_post.posts_by_ids_query(db, post_ids)
        posts, total_count = crud_blog_post.paginate(query, pagination)
        return to_post_page(posts, total_count, pagination, user_id)

    # --- Images ---

    def add_image(self, db: Session, caller: Caller, post_id: int, image: PostImageCreate) -> PostImageOut:
        """Attach an already stored image by URL; the file itself lives in external storage"""
        post = self._get_post_or_404(db, post_id)
        ensure_owner(caller, post.author_id, "add images to your own posts")

        try:
            db_image = crud_blog_post.add_post_image(db, post.id, image.image_url, image.alt_text)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error adding image to post {post_id}: {str(e)}")
            raise
        return PostImageOut.model_validate(db_image)

    def remove_image(self, db: Session, caller: Caller, post_id: int, image_id: int) -> None:
        post = self._get_post_or_404(db, post_id)
        ensure_owner(caller, post.author_id, "remove images from your own posts")

        image = crud_blog_post.get_post_image(db, post_id, image_id)
        if image is None:
            raise NotFoundError("Image not found.")
        try:
            db.delete(image)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error removing image {image_id} from post {post_id}: {str(e)}")
            raise

    # --- Comments ---

    def add_comment(self, db: Session, user_id: int, post_id: int, data: CommentCreate) -> CommentOut:
        post = self._get_post_or_404(db, post_id)
        if data.parent_comment_id is not None:
            parent = crud_comment.get_comment(db, data.parent_comment_id)
            if parent is None:
                raise NotFoundError("Parent comment not found.")
            if parent.post_id != post_id:
                raise InvalidArgumentError("Parent comment belongs to a different post.")

        try:
            comment = crud_comment.create_comment(
                db,
                user_id=user_id,
                post_id=post.id,
                content=data.content,
                parent_comment_id=data.parent_comment_id,
            )
            commenter = crud_user.get_user(db, user_id)
            self.notifier.notify(
                db,
                recipient_id=post.author_id,
                actor_id=user_id,
                notification_type=NotificationType.COMMENT,
                message=f"{commenter.username if commenter else 'Someone'} commented on your post",
                reference_id=post.id,
            )
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error adding comment to post {post_id}: {str(e)}")
            raise

        db.refresh(comment)
        return to_comment_dto(comment)

    def delete_comment(self, db: Session, caller: Caller, comment_id: int) -> None:
        comment = crud_comment.get_comment(db, comment_id)
        if comment is None:
            raise NotFoundError("Comment not found.")
        ensure_owner(caller, comment.user_id, "delete your own comments")

        try:
            crud_comment.delete_comment(db, comment)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error deleting comment {comment_id}: {str(e)}")
            raise

    def list_comments(self, db: Session, post_id: int, pagination: PaginationParams) -> Page[CommentOut]:
        """Top-level comments newest first, each carrying its reply thread"""
        self._get_post_or_404(db, post_id)
        top_level, total_count = crud_comment.get_top_level_comments(
            db, post_id, skip=pagination.skip, limit=pagination.page_size
        )
        replies = crud_comment.get_post_replies(db, post_id) if top_level else []
        return Page[CommentOut](
            items=build_comment_tree(top_level, replies),
            total_count=total_count,
            page=pagination.page,
            page_size=pagination.page_size,
        )

    # --- Drafts ---

    def save_draft(self, db: Session, user_id: int, data: DraftSave) -> DraftBlogOut:
        fields = data.model_dump(exclude={"id"})
        if data.post_id is not None:
            self._get_post_or_404(db, data.post_id)
        draft = self._get_own_draft(db, user_id, data.id) if data.id is not None else None

        try:
            if draft is None:
                draft = crud_draft_blog.create_draft(db, author_id=user_id, **fields)
            else:
                for field, value in fields.items():
                    setattr(draft, field, value)
                db.flush()
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error saving draft for user {user_id}: {str(e)}")
            raise

        db.refresh(draft)
        return DraftBlogOut.model_validate(draft)

    def list_drafts(self, db: Session, user_id: int) -> List[DraftBlogOut]:
        return [DraftBlogOut.model_validate(d) for d in crud_draft_blog.get_user_drafts(db, user_id)]

    def get_draft(self, db: Session, user_id: int, draft_id: int) -> DraftBlogOut:
        return DraftBlogOut.model_validate(self._get_own_draft(db, user_id, draft_id))

    def delete_draft(self, db: Session, user_id: int, draft_id: int) -> None:
        draft = self._get_own_draft(db, user_id, draft_id)
        try:
            crud_draft_blog.delete_draft(db, draft)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error deleting draft {draft_id}: {str(e)}")
            raise

    # --- Helpers ---

    def _get_post_or_404(self, db: Session, post_id: int) -> BlogPost:
        post = crud_blog_post.get_blog_post(db, post_id)
        if post is None:
            raise NotFoundError("Post not found.")
        return post

    def _get_own_draft(self, db: Session, user_id: int, draft_id: int) -> DraftBlog:
        draft = crud_draft_blog.get_draft(db, draft_id)
        if draft is None:
            raise NotFoundError("Draft not found.")
        if draft.author_id != user_id:
            raise ForbiddenError("Not your draft.")
        return draft

    def _unique_slug(self, db: Session, title: str) -> str:
        slug = generate_slug(title) or FALLBACK_SLUG
        if crud_blog_post.slug_exists(db, slug):
            slug = f"{slug}-{slug_suffix()}"
        return slug

    def _sync_tags(self, db: Session, post: BlogPost, tag_names: Optional[Iterable[str]]) -> None:
        """Make sure each named tag exists and is linked to the post; existing links are left alone"""
        linked = {tag.normalized_name for tag in post.tags}
        for name in tag_names or []:
            normalized = normalize_tag(name)
            if not normalized or normalized in linked:
                continue
            tag = crud_tag.get_tag_by_normalized_name(db, normalized)
            if tag is None:
                tag = crud_tag.create_tag(db, name=name.strip(), normalized_name=normalized)
            post.tags.append(tag)
            linked.add(normalized)
        db.flush()
