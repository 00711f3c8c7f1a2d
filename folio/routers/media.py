from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import Field
from folio.core.exceptions import BlogError
from folio.routers.deps import get_current_user_id, get_upload_service, read_upload, read_uploads
from folio.schemas.base import CamelModel
from folio.schemas.media import DeleteSummary, MediaDto, MultipleUploadResult, UploadOptions
from folio.services.upload import UploadService

router = APIRouter()


class MediaUpdate(CamelModel):
    alt_text: Optional[str] = Field(default=None, max_length=300)
    post_id: Optional[str] = None


class MediaDeleteRequest(CamelModel):
    ids: List[str] = Field(min_length=1, max_length=100)


class CoverUploadResponse(CamelModel):
    url: str


@router.post("/", response_model=MediaDto, status_code=201)
async def upload_image(
    file: UploadFile = File(...),
    post_id: Optional[str] = Form(default=None, alias="postId"),
    alt_text: Optional[str] = Form(default=None, alias="altText"),
    user_id: str = Depends(get_current_user_id),
    service: UploadService = Depends(get_upload_service),
):
    """
    Upload an image to the blog-images folder and record it.
    Returns the media record with its public URL.
    """
    upload = await read_upload(file)
    return service.upload_image(upload, user_id, UploadOptions(post_id=post_id, alt_text=alt_text))


@router.post("/batch", response_model=MultipleUploadResult)
async def upload_images(
    files: List[UploadFile] = File(...),
    post_id: Optional[str] = Form(default=None, alias="postId"),
    user_id: str = Depends(get_current_user_id),
    service: UploadService = Depends(get_upload_service),
):
    """
    Upload several images. Each file succeeds or fails on its own;
    failures are reported per file rather than failing the request.
    """
    uploads = await read_uploads(files)
    return service.upload_images(uploads, user_id, UploadOptions(post_id=post_id))


@router.post("/cover", response_model=CoverUploadResponse, status_code=201)
async def upload_cover_image(
    file: UploadFile = File(...),
    post_id: Optional[str] = Form(default=None, alias="postId"),
    user_id: str = Depends(get_current_user_id),
    service: UploadService = Depends(get_upload_service),
):
    upload = await read_upload(file)
    return CoverUploadResponse(url=service.upload_cover_image(upload, user_id, post_id))


@router.get("/me", response_model=List[MediaDto])
def list_my_media(user_id: str = Depends(get_current_user_id), service: UploadService = Depends(get_upload_service)):
    return service.get_user_media(user_id)


@router.get("/post/{post_id}", response_model=List[MediaDto])
def list_post_media(post_id: str, service: UploadService = Depends(get_upload_service)):
    return service.get_post_media(post_id)


@router.patch("/{media_id}", response_model=MediaDto)
def update_media(
    media_id: str,
    media_in: MediaUpdate,
    user_id: str = Depends(get_current_user_id),
    service: UploadService = Depends(get_upload_service),
):
    """
    Change alt text and/or the post the media belongs to.
    Fields left out of the body are untouched; null clears them.
    """
    service.check_owner(media_id, user_id)
    return service.update_media(media_id, **media_in.model_dump(exclude_unset=True))


@router.delete("/{media_id}", status_code=204)
def delete_media(
    media_id: str,
    user_id: str = Depends(get_current_user_id),
    service: UploadService = Depends(get_upload_service),
):
    service.check_owner(media_id, user_id)
    service.delete_media(media_id)


@router.post("/delete", response_model=DeleteSummary)
def delete_media_multiple(
    body: MediaDeleteRequest,
    user_id: str = Depends(get_current_user_id),
    service: UploadService = Depends(get_upload_service),
):
    # Ids the caller cannot delete count as failures, the rest still go
    owned = []
    rejected = 0
    for media_id in body.ids:
        try:
            service.check_owner(media_id, user_id)
            owned.append(media_id)
        except BlogError:
            rejected += 1

    summary = service.delete_media_multiple(owned)
    summary.failed += rejected
    return summary
