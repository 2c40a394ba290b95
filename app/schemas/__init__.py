from .common import Page, PaginationParams
from .blog_post import BlogPost, BlogPostCreate, BlogPostUpdate, PostImage, PostImageCreate, SearchResult, UserSearchResult
from .reaction import ReactionSummary, ReactionToggle, ToggleResult
from .comment import Comment, CommentCreate
from .notification import Notification, UnreadCount
from .user import CreatorAnalytics, ProfileImageUpdate, ProfileUpdate, TopPost, Token, User, UserCreate, UserLogin, UserProfile
from .draft_blog import DraftBlog, DraftSave

__all__ = [
    "Page", "PaginationParams",
    "BlogPost", "BlogPostCreate", "BlogPostUpdate", "PostImage", "PostImageCreate", "SearchResult", "UserSearchResult",
    "ReactionSummary", "ReactionToggle", "ToggleResult",
    "Comment", "CommentCreate",
    "Notification", "UnreadCount",
    "CreatorAnalytics", "ProfileImageUpdate", "ProfileUpdate", "TopPost", "Token", "User", "UserCreate", "UserLogin", "UserProfile",
    "DraftBlog", "DraftSave",
]
