# app/services/post_mapper.py

from collections import Counter
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional

from app.models.blog_post import BlogPost
from app.models.reaction import Reaction, ReactionType
from app.schemas.blog_post import BlogPost as BlogPostOut
from app.schemas.blog_post import PostImage as PostImageOut
from app.schemas.reaction import ReactionSummary


def count_reactions(reactions: List[Reaction]) -> Dict[str, int]:
    counts = Counter(reaction.type for reaction in reactions)
    # Stable key order: the order reaction types are declared in
    return {member.value: counts[member] for member in ReactionType if counts[member]}


def summarize_reactions(reactions: List[Reaction], caller_id: Optional[int] = None) -> ReactionSummary:
    current = None
    if caller_id is not None:
        current = next((r.type.value for r in reactions if r.user_id == caller_id), None)
    return ReactionSummary(
        counts=count_reactions(reactions),
        total_count=len(reactions),
        current_user_reaction=current,
    )


@dataclass(frozen=True)
class PostEngagement:
    """Who liked, bookmarked and reacted to one post, taken from its loaded collections"""
    post_id: int
    liker_ids: FrozenSet[int]
    bookmarker_ids: FrozenSet[int]
    reactions_by_user: Dict[int, str]

    @classmethod
    def from_post(cls, post: BlogPost) -> "PostEngagement":
        return cls(
            post_id=post.id,
            liker_ids=frozenset(like.user_id for like in post.likes),
            bookmarker_ids=frozenset(bookmark.user_id for bookmark in post.bookmarks),
            reactions_by_user={reaction.user_id: reaction.type.value for reaction in post.reactions},
        )

    def annotate(self, dto: BlogPostOut, caller_id: Optional[int]) -> BlogPostOut:
        if caller_id is None:
            return dto
        return dto.model_copy(update={
            "is_liked_by_current_user": caller_id in self.liker_ids,
            "is_bookmarked_by_current_user": caller_id in self.bookmarker_ids,
            "current_user_reaction": self.reactions_by_user.get(caller_id),
        })


def to_anonymous_post_dto(post: BlogPost) -> BlogPostOut:
    """Serialize a post with every caller-specific flag unset"""
    author = post.author
    return BlogPostOut(
        id=post.id,
        title=post.title,
        content=post.content,
        summary=post.summary,
        slug=post.slug,
        is_published=post.is_published,
        is_draft=post.is_draft,
        view_count=post.view_count or 0,
        reading_time_minutes=post.reading_time_minutes,
        category=post.category,
        featured_image_url=post.featured_image_url,
        created_at=post.created_at,
        updated_at=post.updated_at,
        author_id=post.author_id,
        author_username=author.username if author else "",
        author_display_name=author.display_name if author else None,
        author_profile_picture_url=author.profile_picture_url if author else None,
        like_count=len(post.likes),
        comment_count=len(post.comments),
        reaction_counts=count_reactions(post.reactions),
        tags=sorted(tag.name for tag in post.tags),
        images=[PostImageOut.model_validate(image) for image in post.images],
    )


def to_post_dto(post: BlogPost, caller_id: Optional[int] = None) -> BlogPostOut:
    return PostEngagement.from_post(post).annotate(to_anonymous_post_dto(post), caller_id)
