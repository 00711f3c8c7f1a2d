import logging
import secrets
import string
import time
from typing import Iterable, List, Optional, Sequence
from sqlmodel import Session, select
from folio.core.config import settings
from folio.core.exceptions import BlogError, ValidationError
from folio.models.media import Media
from folio.repositories.base import BaseRepository, handle_store_errors
from folio.schemas.media import DeleteSummary, FileUpload, MediaDto, UploadResult
from folio.services.storage import S3Storage
from folio.utils import files

logger = logging.getLogger(__name__)

_UNSET = object()


class MediaRepository(BaseRepository[Media]):
    """
    Uploaded media: the object in the blob store plus its metadata row.

    The two are written and removed by separate calls with no transaction
    spanning them. Upload-then-record can leave an orphaned object if the
    insert fails; delete removes the row even when the object removal fails.
    """

    model = Media

    def __init__(self, session: Session, storage: S3Storage):
        super().__init__(session)
        self.storage = storage

    # Uploads

    def validate_file(
        self,
        file: FileUpload,
        max_size: Optional[int] = None,
        allowed_types: Optional[Sequence[str]] = None,
    ) -> None:
        max_size = max_size or settings.MEDIA_MAX_SIZE
        allowed_types = allowed_types or settings.MEDIA_ALLOWED_TYPES

        if file.size > max_size:
            raise ValidationError(
                f"File size exceeds {files.format_file_size(max_size)} limit",
                {"file": "File too large"},
            )
        if file.content_type not in allowed_types:
            raise ValidationError(
                f"File type {file.content_type} is not allowed",
                {"file": "Unsupported file type"},
            )

    @staticmethod
    def generate_filename(original: str) -> str:
        # "<epoch ms>-<6 random chars>.<ext>"
        suffix = "".join(secrets.choice(string.ascii_lowercase + string.digits) for _ in range(6))
        extension = files.get_file_extension(original)
        name = f"{int(time.time() * 1000)}-{suffix}"
        return f"{name}.{extension}" if extension else name

    def upload_file(
        self,
        file: FileUpload,
        uploader_id: str,
        folder: Optional[str] = None,
        max_size: Optional[int] = None,
        allowed_types: Optional[Sequence[str]] = None,
    ) -> UploadResult:
        """Validate and store one file under "<uploader_id>/" in `folder`."""
        folder = folder or settings.MEDIA_DEFAULT_FOLDER
        self.validate_file(file, max_size=max_size, allowed_types=allowed_types)

        path = f"{uploader_id}/{self.generate_filename(file.filename)}"
        stored = self.storage.upload(folder, path, file.content, file.content_type)

        logger.info("Uploaded %s (%s) to %s", file.filename, files.format_file_size(file.size), stored.full_path)
        return UploadResult(path=stored.path, full_path=stored.full_path, url=stored.public_url)

    def upload_files(self, uploads: Iterable[FileUpload], uploader_id: str, folder: Optional[str] = None) -> List[UploadResult]:
        results = []
        for file in uploads:
            try:
                results.append(self.upload_file(file, uploader_id, folder))
            except BlogError as e:
                logger.warning("Failed to upload %s: %s", file.filename, e.message)
        return results

    def create_media_record(
        self,
        upload_result: UploadResult,
        file: FileUpload,
        uploader_id: str,
        post_id: Optional[str] = None,
        alt_text: Optional[str] = None,
        folder: Optional[str] = None,
    ) -> MediaDto:
        media = self.create({
            "filename": file.filename,
            "file_path": upload_result.path,
            "folder": folder or settings.MEDIA_DEFAULT_FOLDER,
            "file_size": file.size,
            "mime_type": file.content_type,
            "uploader_id": uploader_id,
            "post_id": post_id,
            "alt_text": alt_text,
        })
        return self.to_dto(media, url=upload_result.url)

    def upload_and_create(
        self,
        file: FileUpload,
        uploader_id: str,
        post_id: Optional[str] = None,
        alt_text: Optional[str] = None,
        folder: Optional[str] = None,
        max_size: Optional[int] = None,
        allowed_types: Optional[Sequence[str]] = None,
    ) -> MediaDto:
        folder = folder or settings.MEDIA_DEFAULT_FOLDER
        upload_result = self.upload_file(file, uploader_id, folder, max_size=max_size, allowed_types=allowed_types)
        try:
            return self.create_media_record(upload_result, file, uploader_id, post_id, alt_text, folder)
        except BlogError:
            logger.error("Media record insert failed, object %s left orphaned", upload_result.full_path)
            raise

    # Deletes

    def delete_media(self, id: str, folder: Optional[str] = None) -> None:
        media = self.get(id)
        folder = folder or media.folder
        file_path = media.file_path

        try:
            self.storage.remove(folder, file_path)
        except BlogError as e:
            # The row goes regardless; the object can be swept later
            logger.error("Storage delete error for media %s: %s", id, e.message)

        self.delete(id)
        logger.info("Deleted media %s (%s)", id, file_path)

    def delete_media_multiple(self, ids: Iterable[str], folder: Optional[str] = None) -> DeleteSummary:
        summary = DeleteSummary()
        for id in ids:
            try:
                self.delete_media(id, folder)
                summary.deleted += 1
            except BlogError as e:
                logger.error("Failed to delete media %s: %s", id, e.message)
                summary.failed += 1
        return summary

    # Queries

    @handle_store_errors
    def find_by_post(self, post_id: str) -> List[MediaDto]:
        statement = select(Media).where(Media.post_id == post_id).order_by(Media.created_at.desc())
        return [self.to_dto(m) for m in self.session.exec(statement).all()]

    @handle_store_errors
    def find_by_uploader(self, uploader_id: str) -> List[MediaDto]:
        statement = select(Media).where(Media.uploader_id == uploader_id).order_by(Media.created_at.desc())
        return [self.to_dto(m) for m in self.session.exec(statement).all()]

    def update_media(self, id: str, alt_text=_UNSET, post_id=_UNSET) -> MediaDto:
        """Set alt text and/or (re)associate with a post; None clears either."""
        values = {}
        if alt_text is not _UNSET:
            values["alt_text"] = alt_text
        if post_id is not _UNSET:
            values["post_id"] = post_id
        return self.to_dto(self.update(id, values))

    # Helpers

    format_file_size = staticmethod(files.format_file_size)
    get_file_extension = staticmethod(files.get_file_extension)
    is_image = staticmethod(files.is_image)
    is_video = staticmethod(files.is_video)

    def to_dto(self, media: Media, url: Optional[str] = None) -> MediaDto:
        return MediaDto(
            id=media.id,
            url=url or self.storage.get_public_url(media.folder, media.file_path),
            path=media.file_path,
            filename=media.filename,
            size=media.file_size,
            mime_type=media.mime_type,
            alt_text=media.alt_text,
            post_id=media.post_id,
        )
