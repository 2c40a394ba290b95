# app/api/endpoints/blog_posts.py

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.orm import Session

from app import schemas
from app.api import deps
from app.core.security import Caller
from app.services import Services

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=schemas.BlogPost, status_code=201)
def create_blog_post(
    post: schemas.BlogPostCreate,
    user_id: int = Depends(deps.get_current_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    logger.info(f"Creating blog post '{post.title}' for user {user_id}")
    return services.posts.create_post(db, user_id, post)


@router.get("/search", response_model=schemas.Page[schemas.BlogPost])
def search_blog_posts(
    q: str = Query(..., min_length=1),
    pagination: schemas.PaginationParams = Depends(deps.get_pagination),
    caller_id: Optional[int] = Depends(deps.get_optional_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.posts.search_posts(db, q, pagination, caller_id)


@router.get("/fullsearch", response_model=schemas.SearchResult)
def full_text_search(
    q: str = Query(..., min_length=1),
    pagination: schemas.PaginationParams = Depends(deps.get_pagination),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    """Posts, users and tags in one response"""
    logger.info(f"Full search for '{q}'")
    return services.posts.full_text_search(db, q, pagination)


@router.get("/bookmarks", response_model=schemas.Page[schemas.BlogPost])
def get_bookmarked_posts(
    pagination: schemas.PaginationParams = Depends(deps.get_pagination),
    user_id: int = Depends(deps.get_current_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.posts.list_bookmarked_posts(db, user_id, pagination)


@router.get("/user/{author_id}", response_model=schemas.Page[schemas.BlogPost])
def get_posts_by_user(
    author_id: int,
    pagination: schemas.PaginationParams = Depends(deps.get_pagination),
    caller_id: Optional[int] = Depends(deps.get_optional_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.posts.list_posts_by_author(db, author_id, pagination, caller_id)


@router.get("/slug/{slug}", response_model=schemas.BlogPost)
def read_blog_post_by_slug(
    slug: str,
    caller_id: Optional[int] = Depends(deps.get_optional_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    """Counts as a page view"""
    return services.posts.get_post_by_slug(db, slug, caller_id)


# --- Drafts ---

@router.get("/drafts", response_model=List[schemas.DraftBlog])
def list_drafts(
    user_id: int = Depends(deps.get_current_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.posts.list_drafts(db, user_id)


@router.post("/drafts", response_model=schemas.DraftBlog)
def save_draft(
    draft: schemas.DraftSave,
    user_id: int = Depends(deps.get_current_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.posts.save_draft(db, user_id, draft)


@router.get("/drafts/{draft_id}", response_model=schemas.DraftBlog)
def read_draft(
    draft_id: int,
    user_id: int = Depends(deps.get_current_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.posts.get_draft(db, user_id, draft_id)


@router.delete("/drafts/{draft_id}", status_code=204)
def delete_draft(
    draft_id: int,
    user_id: int = Depends(deps.get_current_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    services.posts.delete_draft(db, user_id, draft_id)
    return Response(status_code=204)


# --- Comments ---

@router.delete("/comments/{comment_id}", status_code=204)
def delete_comment(
    comment_id: int,
    caller: Caller = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    services.posts.delete_comment(db, caller, comment_id)
    return Response(status_code=204)


# --- Single post ---

@router.get("/{post_id}", response_model=schemas.BlogPost)
def read_blog_post(
    post_id: int = Path(..., title="The ID of the post to get"),
    caller_id: Optional[int] = Depends(deps.get_optional_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.posts.get_post_by_id(db, post_id, caller_id)


@router.put("/{post_id}", response_model=schemas.BlogPost)
def update_blog_post(
    post: schemas.BlogPostUpdate,
    post_id: int = Path(..., title="The ID of the post to update"),
    caller: Caller = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.posts.update_post(db, caller, post_id, post)


@router.delete("/{post_id}", status_code=204)
def delete_blog_post(
    post_id: int = Path(..., title="The ID of the post to delete"),
    caller: Caller = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    services.posts.delete_post(db, caller, post_id)
    return Response(status_code=204)


@router.post("/{post_id}/like", response_model=schemas.ToggleResult)
def toggle_like(
    post_id: int = Path(..., title="The ID of the post to like or unlike"),
    user_id: int = Depends(deps.get_current_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return schemas.ToggleResult(active=services.engagement.toggle_like(db, user_id, post_id))


@router.post("/{post_id}/bookmark", response_model=schemas.ToggleResult)
def toggle_bookmark(
    post_id: int,
    user_id: int = Depends(deps.get_current_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return schemas.ToggleResult(active=services.engagement.toggle_bookmark(db, user_id, post_id))


@router.post("/{post_id}/reactions", response_model=schemas.ReactionSummary)
def toggle_reaction(
    reaction: schemas.ReactionToggle,
    post_id: int,
    user_id: int = Depends(deps.get_current_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.engagement.toggle_reaction(db, user_id, post_id, reaction.type)


@router.get("/{post_id}/reactions", response_model=schemas.ReactionSummary)
def get_reactions(
    post_id: int,
    caller_id: Optional[int] = Depends(deps.get_optional_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.engagement.get_reactions(db, post_id, caller_id)


@router.get("/{post_id}/comments", response_model=schemas.Page[schemas.Comment])
def list_comments(
    post_id: int,
    pagination: schemas.PaginationParams = Depends(deps.get_pagination),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.posts.list_comments(db, post_id, pagination)


@router.post("/{post_id}/comments", response_model=schemas.Comment, status_code=201)
def add_comment(
    comment: schemas.CommentCreate,
    post_id: int,
    user_id: int = Depends(deps.get_current_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.posts.add_comment(db, user_id, post_id, comment)


@router.post("/{post_id}/images", response_model=schemas.PostImage, status_code=201)
def add_image(
    image: schemas.PostImageCreate,
    post_id: int,
    caller: Caller = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.posts.add_image(db, caller, post_id, image)


@router.delete("/{post_id}/images/{image_id}", status_code=204)
def remove_image(
    post_id: int,
    image_id: int,
    caller: Caller = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    services.posts.remove_image(db, caller, post_id, image_id)
    return Response(status_code=204)
