from typing import Any, List, Optional
from datetime import datetime
from pydantic import Field
from folio.models.post import PostCategory, PostStatus
from folio.schemas.base import CamelModel

# Inputs

class CreatePostInput(CamelModel):
    title: str
    excerpt: Optional[str] = None
    content: Any = None  # Rich-text document ({"type": "doc", "content": [...]})
    tags: List[str] = []
    status: PostStatus = PostStatus.DRAFT
    category: PostCategory = PostCategory.TECHNICAL
    featured: bool = False
    cover_image_url: Optional[str] = None

class UpdatePostInput(CamelModel):
    # Every field optional; only the ones explicitly set are applied
    title: Optional[str] = None
    excerpt: Optional[str] = None
    content: Any = None
    tags: Optional[List[str]] = None  # [] clears tags, omitted leaves them alone
    status: Optional[PostStatus] = None
    category: Optional[PostCategory] = None
    featured: Optional[bool] = None
    cover_image_url: Optional[str] = None

class BlogPostFilters(CamelModel):
    tag: Optional[str] = None  # Tag slug
    category: Optional[PostCategory] = None
    search: Optional[str] = None
    author_id: Optional[str] = None
    limit: int = Field(default=20, ge=1)
    offset: int = Field(default=0, ge=0)

# Outputs

class AuthorDto(CamelModel):
    id: str
    name: str
    avatar: Optional[str] = None

class TagDto(CamelModel):
    id: str
    name: str
    slug: str
    color: str

class TagWithCount(TagDto):
    post_count: int = 0

class PostDto(CamelModel):
    id: str
    title: str
    slug: str
    excerpt: str
    content: Any
    author: AuthorDto
    cover_image: Optional[str] = None
    tags: List[TagDto] = []
    category: PostCategory
    status: PostStatus
    featured: bool
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    read_time: int
    view_count: int

class AuthorStats(CamelModel):
    total: int = 0
    published: int = 0
    drafts: int = 0
    featured: int = 0
