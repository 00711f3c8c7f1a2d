from typing import Optional
from datetime import datetime
from sqlmodel import Field, SQLModel
from folio.models.common import new_id, utcnow

class Tag(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)

    name: str = Field(unique=True, index=True)  # Display form, e.g. "React Native"
    slug: str = Field(unique=True, index=True)  # e.g. "react-native"
    color: str = Field(default="#3B82F6")  # Hex

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = None
