from app.models.user import User, UserRole
from app.models.follow import Follow
from app.models.tag import Tag, blog_post_tags
from app.models.blog_post import BlogPost, PostImage
from app.models.comment import Comment
from app.models.blog_post_like import BlogPostLike
from app.models.bookmark import Bookmark
from app.models.reaction import Reaction, ReactionType
from app.models.notification import Notification, NotificationType
from app.models.draft_blog import DraftBlog

__all__ = [
    "User",
    "UserRole",
    "Follow",
    "Tag",
    "blog_post_tags",
    "BlogPost",
    "PostImage",
    "Comment",
    "BlogPostLike",
    "Bookmark",
    "Reaction",
    "ReactionType",
    "Notification",
    "NotificationType",
    "DraftBlog",
]
