from typing import List, Optional
from pydantic import BaseModel
from folio.schemas.base import CamelModel


class FileUpload(BaseModel):
    """An uploaded file held in memory, independent of the web framework."""

    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


class UploadResult(CamelModel):
    path: str  # Key inside the folder, "<uploader>/<file>"
    full_path: str  # "<folder>/<uploader>/<file>"
    url: str


class MediaDto(CamelModel):
    id: str
    url: str
    path: str
    filename: str
    size: int
    mime_type: str
    alt_text: Optional[str] = None
    post_id: Optional[str] = None


class UploadOptions(CamelModel):
    post_id: Optional[str] = None
    alt_text: Optional[str] = None
    folder: Optional[str] = None
    max_size: Optional[int] = None  # Bytes
    allowed_types: Optional[List[str]] = None


class FailedUpload(CamelModel):
    file: str
    error: str


class MultipleUploadResult(CamelModel):
    successful: List[MediaDto] = []
    failed: List[FailedUpload] = []
    total: int = 0
    success_count: int = 0
    failed_count: int = 0


class DeleteSummary(CamelModel):
    deleted: int = 0
    failed: int = 0
