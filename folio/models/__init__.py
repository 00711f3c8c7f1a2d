# Import all models to register them with SQLModel
from folio.models.post import Post, PostTag, PostStatus, PostCategory
from folio.models.tag import Tag
from folio.models.media import Media
from folio.models.profile import Profile

__all__ = [
    "Post",
    "PostTag",
    "PostStatus",
    "PostCategory",
    "Tag",
    "Media",
    "Profile",
]
