from typing import Optional
from datetime import datetime
from sqlmodel import Field, SQLModel
from folio.models.common import utcnow

class Profile(SQLModel, table=True):
    # Same id as the identity-service user
    id: str = Field(primary_key=True)

    full_name: Optional[str] = None
    avatar_url: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
