from typing import Any, Dict, List, Optional
from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, Query
from folio.routers.deps import get_blog_service, get_current_user_id
from folio.schemas.blog import AuthorStats, BlogPostFilters, PostDto
from folio.services.blog import BlogService
from folio.validation import Err, PostFiltersForm, PostForm, PostUpdateForm, validate_form

router = APIRouter()


def _validated(schema, data: Dict[str, Any]):
    result = validate_form(schema, data)
    if isinstance(result, Err):
        raise result.error
    return result.value


@router.get("/", response_model=List[PostDto])
def list_posts(
    tag: Optional[str] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
    author_id: Optional[str] = Query(default=None, alias="authorId"),
    limit: int = 20,
    offset: int = 0,
    service: BlogService = Depends(get_blog_service),
):
    """
    Published posts, newest first.

    Note: `tag` narrows the page after `limit`/`offset` are applied.
    """
    form = _validated(PostFiltersForm, {
        "tag": tag,
        "category": category,
        "search": search,
        "author_id": author_id,
        "limit": limit,
        "offset": offset,
    })
    return service.get_published_posts(BlogPostFilters(**form.model_dump()))


@router.get("/featured", response_model=List[PostDto])
def list_featured_posts(limit: int = Query(default=5, ge=1, le=50), service: BlogService = Depends(get_blog_service)):
    return service.get_featured_posts(limit)


@router.get("/search", response_model=List[PostDto])
def search_posts(
    q: str = Query(min_length=1, max_length=100),
    limit: int = Query(default=20, ge=1, le=100),
    service: BlogService = Depends(get_blog_service),
):
    return service.search_posts(q, limit)


@router.get("/me/all", response_model=List[PostDto])
def list_my_posts(
    include_drafts: bool = Query(default=True, alias="includeDrafts"),
    user_id: str = Depends(get_current_user_id),
    service: BlogService = Depends(get_blog_service),
):
    return service.get_author_posts(user_id, include_drafts)


@router.get("/me/stats", response_model=AuthorStats)
def read_my_stats(user_id: str = Depends(get_current_user_id), service: BlogService = Depends(get_blog_service)):
    return service.get_author_stats(user_id)


@router.get("/slug/{slug}", response_model=PostDto)
def read_post_by_slug(slug: str, background_tasks: BackgroundTasks, service: BlogService = Depends(get_blog_service)):
    """
    Get a post by slug and count the view once the response is sent.
    """
    post = service.get_post_by_slug(slug, background_tasks)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


@router.get("/{post_id}", response_model=PostDto)
def read_post(post_id: str, service: BlogService = Depends(get_blog_service)):
    post = service.get_post_by_id(post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


@router.get("/{post_id}/related", response_model=List[PostDto])
def list_related_posts(
    post_id: str,
    limit: int = Query(default=4, ge=1, le=20),
    service: BlogService = Depends(get_blog_service),
):
    return service.get_related_posts(post_id, limit)


@router.post("/", response_model=PostDto, status_code=201)
def create_post(
    body: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    service: BlogService = Depends(get_blog_service),
):
    form = _validated(PostForm, body)
    return service.create_post(form.to_input(), user_id)


@router.put("/{post_id}", response_model=PostDto)
def update_post(
    post_id: str,
    body: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    service: BlogService = Depends(get_blog_service),
):
    """
    Partial update: only the fields in the body change. `tags` replaces the
    post's tags when present and leaves them alone when omitted.
    """
    form = _validated(PostUpdateForm, body)
    return service.update_post(post_id, form.to_input(), user_id)


@router.delete("/{post_id}", status_code=204)
def delete_post(post_id: str, user_id: str = Depends(get_current_user_id), service: BlogService = Depends(get_blog_service)):
    service.delete_post(post_id, user_id)
