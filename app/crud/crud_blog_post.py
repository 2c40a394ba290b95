# app/crud/crud_blog_post.py

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Query, Session, selectinload

from app.models.blog_post import BlogPost, PostImage
from app.models.comment import Comment
from app.models.reaction import Reaction
from app.models.tag import Tag
from app.schemas.common import PaginationParams
from app.utils.text import LIKE_ESCAPE, contains_pattern, normalize_tag

logger = logging.getLogger(__name__)


def full_post_query(db: Session) -> Query:
    """Posts with every collection the post DTO reads, loaded up front"""
    return db.query(BlogPost).options(
        selectinload(BlogPost.author),
        selectinload(BlogPost.images),
        selectinload(BlogPost.likes),
        selectinload(BlogPost.comments),
        selectinload(BlogPost.reactions),
        selectinload(BlogPost.bookmarks),
        selectinload(BlogPost.tags),
    )


def paginate(query: Query, pagination: PaginationParams) -> Tuple[List[BlogPost], int]:
    total_count = query.order_by(None).count()
    items = query.offset(pagination.skip).limit(pagination.page_size).all()
    return items, total_count


def get_blog_post(db: Session, post_id: int) -> Optional[BlogPost]:
    return db.query(BlogPost).filter(BlogPost.id == post_id).first()


def get_full_blog_post(db: Session, post_id: int) -> Optional[BlogPost]:
    return full_post_query(db).filter(BlogPost.id == post_id).first()


def get_full_blog_post_by_slug(db: Session, slug: str) -> Optional[BlogPost]:
    return full_post_query(db).filter(BlogPost.slug == slug).first()


def slug_exists(db: Session, slug: str) -> bool:
    return db.query(BlogPost.id).filter(BlogPost.slug == slug).first() is not None


def create_blog_post(db: Session, **fields) -> BlogPost:
    db_post = BlogPost(**fields)
    db.add(db_post)
    db.flush()
    logger.info(f"Blog post staged. ID: {db_post.id}, slug: {db_post.slug}")
    return db_post


def delete_blog_post(db: Session, post: BlogPost) -> None:
    db.delete(post)
    db.flush()


def latest_posts_query(db: Session) -> Query:
    return full_post_query(db)\
        .filter(BlogPost.is_published.is_(True))\
        .order_by(BlogPost.created_at.desc(), BlogPost.id.desc())


def posts_by_authors_query(db: Session, author_ids: Iterable[int]) -> Query:
    return full_post_query(db)\
        .filter(BlogPost.is_published.is_(True), BlogPost.author_id.in_(list(author_ids)))\
        .order_by(BlogPost.created_at.desc(), BlogPost.id.desc())


def _text_match(text: str):
    pattern = contains_pattern(text)
    return or_(
        BlogPost.title.ilike(pattern, escape=LIKE_ESCAPE),
        BlogPost.content.ilike(pattern, escape=LIKE_ESCAPE),
        BlogPost.summary.ilike(pattern, escape=LIKE_ESCAPE),
    )


def search_posts_query(db: Session, text: str) -> Query:
    return full_post_query(db)\
        .filter(BlogPost.is_published.is_(True), _text_match(text))\
        .order_by(BlogPost.created_at.desc(), BlogPost.id.desc())


def full_text_search_query(db: Session, text: str) -> Query:
    """Published posts matching on title, content, summary or a tag name, most viewed first"""
    tag_match = BlogPost.tags.any(Tag.normalized_name.ilike(contains_pattern(normalize_tag(text)), escape=LIKE_ESCAPE))
    return full_post_query(db)\
        .filter(BlogPost.is_published.is_(True), or_(_text_match(text), tag_match))\
        .order_by(BlogPost.view_count.desc(), BlogPost.id.desc())


def trending_posts_query(db: Session, since: datetime) -> Query:
    """
    Published posts created since ``since``, ranked by engagement score.

    score = view_count + 3 * reactions + 5 * comments, ties broken by raw views.
    """
    reaction_count = select(func.count(Reaction.id))\
        .where(Reaction.post_id == BlogPost.id)\
        .correlate(BlogPost)\
        .scalar_subquery()
    comment_count = select(func.count(Comment.id))\
        .where(Comment.post_id == BlogPost.id)\
        .correlate(BlogPost)\
        .scalar_subquery()
    score = BlogPost.view_count + reaction_count * 3 + comment_count * 5

    return full_post_query(db)\
        .filter(BlogPost.is_published.is_(True), BlogPost.created_at >= since)\
        .order_by(score.desc(), BlogPost.view_count.desc(), BlogPost.id.desc())


def posts_by_ids_query(db: Session, post_ids: Iterable[int]) -> Query:
    return full_post_query(db)\
        .filter(BlogPost.id.in_(list(post_ids)))\
        .order_by(BlogPost.created_at.desc(), BlogPost.id.desc())


def increment_view_count(db: Session, post: BlogPost) -> None:
    post.view_count = (post.view_count or 0) + 1
    db.flush()


# --- Images ---

def get_post_image(db: Session, post_id: int, image_id: int) -> Optional[PostImage]:
    return db.query(PostImage)\
        .filter(PostImage.id == image_id, PostImage.post_id == post_id)\
        .first()


def get_max_image_sort_order(db: Session, post_id: int) -> int:
    max_order = db.query(func.max(PostImage.sort_order))\
        .filter(PostImage.post_id == post_id)\
        .scalar()
    return max_order or 0


def add_post_image(db: Session, post_id: int, image_url: str, alt_text: Optional[str]) -> PostImage:
    image = PostImage(
        post_id=post_id,
        image_url=image_url,
        alt_text=alt_text,
        sort_order=get_max_image_sort_order(db, post_id) + 1,
    )
    db.add(image)
    db.flush()
    return image


def count_published_by_author(db: Session, author_id: int) -> int:
    return db.query(BlogPost)\
             .filter(BlogPost.author_id == author_id, BlogPost.is_published.is_(True))\
             .count()


def get_published_posts_with_engagement(db: Session, author_id: int) -> List[BlogPost]:
    return db.query(BlogPost)\
             .options(selectinload(BlogPost.reactions), selectinload(BlogPost.comments))\
             .filter(BlogPost.author_id == author_id, BlogPost.is_published.is_(True))\
             .all()
