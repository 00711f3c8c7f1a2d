from folio.schemas.blog import (
    AuthorDto,
    AuthorStats,
    BlogPostFilters,
    CreatePostInput,
    PostDto,
    TagDto,
    TagWithCount,
    UpdatePostInput,
)
from folio.schemas.media import (
    DeleteSummary,
    FailedUpload,
    FileUpload,
    MediaDto,
    MultipleUploadResult,
    UploadOptions,
    UploadResult,
)

__all__ = [
    "AuthorDto",
    "AuthorStats",
    "BlogPostFilters",
    "CreatePostInput",
    "PostDto",
    "TagDto",
    "TagWithCount",
    "UpdatePostInput",
    "DeleteSummary",
    "FailedUpload",
    "FileUpload",
    "MediaDto",
    "MultipleUploadResult",
    "UploadOptions",
    "UploadResult",
]
