from typing import Any, Dict, List
from fastapi import APIRouter, Body, Depends, Query
from folio.routers.deps import get_blog_service, get_current_user_id
from folio.schemas.blog import PostDto, TagDto, TagWithCount
from folio.services.blog import BlogService
from folio.validation import Err, TagForm, validate_form

router = APIRouter()


@router.get("/", response_model=List[TagWithCount])
def list_tags(service: BlogService = Depends(get_blog_service)):
    """
    All tags in name order, each with the number of posts carrying it.
    """
    return service.get_all_tags()


@router.get("/popular", response_model=List[TagWithCount])
def list_popular_tags(limit: int = Query(default=20, ge=1, le=100), service: BlogService = Depends(get_blog_service)):
    return service.get_popular_tags(limit)


@router.get("/{slug}/posts", response_model=List[PostDto])
def list_posts_by_tag(
    slug: str,
    limit: int = Query(default=20, ge=1, le=100),
    service: BlogService = Depends(get_blog_service),
):
    return service.get_posts_by_tag(slug, limit)


@router.put("/{tag_id}", response_model=TagDto)
def update_tag(
    tag_id: str,
    body: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    service: BlogService = Depends(get_blog_service),
):
    """
    Rename or recolour a tag. Renaming regenerates its slug; a name already
    taken by another tag is a 409.
    """
    result = validate_form(TagForm, body)
    if isinstance(result, Err):
        raise result.error
    return service.update_tag(tag_id, name=result.value.name, color=result.value.color)
