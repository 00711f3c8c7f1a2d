from typing import Any, Dict, Optional
from datetime import datetime
from enum import Enum
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import JSON
from folio.models.common import new_id, utcnow

class PostStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"  # Addressable by id, hidden from published listings

class PostCategory(str, Enum):
    TECHNICAL = "technical"
    CAREER = "career"
    TUTORIAL = "tutorial"
    THOUGHTS = "thoughts"

class PostTag(SQLModel, table=True):
    __tablename__ = "post_tag"

    # One row per (post, tag) pair; removed with either side
    post_id: str = Field(foreign_key="post.id", primary_key=True, ondelete="CASCADE")
    tag_id: str = Field(foreign_key="tag.id", primary_key=True, ondelete="CASCADE")

class Post(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)

    # Author (identity-service user id, name/avatar come from Profile at read time)
    author_id: str = Field(index=True)

    # Content
    title: str = Field(index=True)
    slug: str = Field(unique=True, index=True)  # URL-friendly title
    excerpt: Optional[str] = None  # Short summary
    content: Dict[str, Any] = Field(default={}, sa_column=Column(JSON))  # Rich-text document

    # Images
    cover_image_url: Optional[str] = None

    # Categorization
    category: PostCategory = Field(default=PostCategory.TECHNICAL, index=True)

    # Status
    status: PostStatus = Field(default=PostStatus.DRAFT, index=True)
    featured: bool = Field(default=False)
    published_at: Optional[datetime] = None  # Set once, on first publish

    # Derived
    read_time: int = Field(default=0)  # Minutes
    view_count: int = Field(default=0)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
