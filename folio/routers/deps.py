from typing import List
from fastapi import Depends, HTTPException, UploadFile, status
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session
from folio.core.security import decode_subject
from folio.db.session import get_session
from folio.schemas.media import FileUpload
from folio.services.blog import BlogService, create_blog_service
from folio.services.storage import S3Storage, get_storage
from folio.services.upload import UploadService, create_upload_service

# Tokens are issued by the identity service, not by this API
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/v1/auth/token")


def get_current_user_id(token: str = Depends(oauth2_scheme)) -> str:
    user_id = decode_subject(token)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id


def get_blog_service(session: Session = Depends(get_session)) -> BlogService:
    return create_blog_service(session)


def get_upload_service(
    session: Session = Depends(get_session),
    storage: S3Storage = Depends(get_storage),
) -> UploadService:
    return create_upload_service(session, storage)


async def read_upload(file: UploadFile) -> FileUpload:
    content = await file.read()
    return FileUpload(
        filename=file.filename or "upload",
        content_type=file.content_type or "application/octet-stream",
        content=content,
    )


async def read_uploads(files: List[UploadFile]) -> List[FileUpload]:
    return [await read_upload(file) for file in files]
