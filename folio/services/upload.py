import logging
from typing import Iterable, List, Optional
from sqlmodel import Session
from folio.core.config import settings
from folio.core.exceptions import BlogError, PermissionDeniedError, ValidationError
from folio.repositories.media import MediaRepository
from folio.services.storage import S3Storage, get_storage
from folio.schemas.media import (
    DeleteSummary,
    FailedUpload,
    FileUpload,
    MediaDto,
    MultipleUploadResult,
    UploadOptions,
)
from folio.utils import files

logger = logging.getLogger(__name__)


class UploadService:
    """Image uploads on top of the media repository."""

    def __init__(self, media_repo: MediaRepository):
        self.media_repo = media_repo

    def upload_image(self, file: FileUpload, uploader_id: str, options: Optional[UploadOptions] = None) -> MediaDto:
        """
        Validate, store and record a single image.

        `options.max_size` and `options.allowed_types` override the configured
        limits for this call only. Whatever the allow-list says, the file must
        be an image.
        """
        options = options or UploadOptions()
        self.media_repo.validate_file(file, max_size=options.max_size, allowed_types=options.allowed_types)
        if not files.is_image(file.content_type):
            raise ValidationError("Only image files are allowed", {"file": "Not an image"})

        return self.media_repo.upload_and_create(
            file,
            uploader_id,
            post_id=options.post_id,
            alt_text=options.alt_text,
            folder=options.folder or settings.MEDIA_DEFAULT_FOLDER,
            max_size=options.max_size,
            allowed_types=options.allowed_types,
        )

    def upload_images(
        self,
        uploads: List[FileUpload],
        uploader_id: str,
        options: Optional[UploadOptions] = None,
    ) -> MultipleUploadResult:
        result = MultipleUploadResult(total=len(uploads))
        for file in uploads:
            try:
                result.successful.append(self.upload_image(file, uploader_id, options))
            except BlogError as e:
                logger.warning("Upload of %s failed: %s", file.filename, e.message)
                result.failed.append(FailedUpload(file=file.filename, error=e.message))

        result.success_count = len(result.successful)
        result.failed_count = len(result.failed)
        return result

    def upload_cover_image(self, file: FileUpload, uploader_id: str, post_id: Optional[str] = None) -> str:
        media = self.upload_image(
            file,
            uploader_id,
            UploadOptions(
                post_id=post_id,
                folder=settings.MEDIA_COVER_FOLDER,
                alt_text=f"Cover image for {'post' if post_id else 'blog'}",
            ),
        )
        return media.url

    def check_owner(self, media_id: str, uploader_id: str) -> None:
        media = self.media_repo.get(media_id)
        if media.uploader_id != uploader_id:
            raise PermissionDeniedError("You do not have permission to modify this media")

    def delete_media(self, media_id: str, folder: Optional[str] = None) -> None:
        self.media_repo.delete_media(media_id, folder)

    def delete_media_multiple(self, media_ids: Iterable[str], folder: Optional[str] = None) -> DeleteSummary:
        return self.media_repo.delete_media_multiple(media_ids, folder)

    def get_post_media(self, post_id: str) -> List[MediaDto]:
        return self.media_repo.find_by_post(post_id)

    def get_user_media(self, uploader_id: str) -> List[MediaDto]:
        return self.media_repo.find_by_uploader(uploader_id)

    def update_media(self, media_id: str, **updates) -> MediaDto:
        # Accepts alt_text and/or post_id; an explicit None clears the field
        return self.media_repo.update_media(media_id, **updates)


def create_upload_service(session: Session, storage: Optional[S3Storage] = None) -> UploadService:
    return UploadService(MediaRepository(session, storage or get_storage()))
