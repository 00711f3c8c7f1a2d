from typing import Optional
from datetime import datetime
from sqlmodel import Field, SQLModel
from folio.models.common import new_id, utcnow

class Media(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)

    # File
    filename: str  # Original name as uploaded
    file_path: str = Field(index=True)  # Key inside the storage folder, e.g. "<uploader>/<file>"
    folder: str = Field(default="blog-images")  # Storage folder the object lives in
    file_size: int  # Bytes
    mime_type: str

    # References
    uploader_id: str = Field(index=True)
    post_id: Optional[str] = Field(default=None, foreign_key="post.id", index=True, ondelete="SET NULL")

    # Accessibility
    alt_text: Optional[str] = None

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
