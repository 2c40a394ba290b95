# app/crud/__init__.py

from . import (
    crud_blog_post,
    crud_blog_post_like,
    crud_bookmark,
    crud_comment,
    crud_draft_blog,
    crud_follow,
    crud_notification,
    crud_reaction,
    crud_tag,
    crud_user,
)

from .crud_user import (
    create_user,
    get_user,
    get_user_by_email,
    get_user_by_username,
)

__all__ = [
    "crud_blog_post", "crud_blog_post_like", "crud_bookmark", "crud_comment",
    "crud_draft_blog", "crud_follow", "crud_notification", "crud_reaction",
    "crud_tag", "crud_user",
    "create_user", "get_user", "get_user_by_email", "get_user_by_username",
]
