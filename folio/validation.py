"""
Input validation for the blog content layer.

Validators return a tagged result instead of raising, so callers decide
whether to branch on it or turn it into an exception:

    result = validate_post_input(data)
    if isinstance(result, Err):
        return result.error.errors

Two levels exist. The service-level checks (`validate_post_input`,
`validate_post_update`) are the minimum contract for every caller. The
form schemas (`PostForm`, `PostUpdateForm`, `TagForm`, `PostFiltersForm`)
are stricter and are what the HTTP layer applies to request bodies.
"""
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as SchemaError
from folio.core.exceptions import ValidationError
from folio.models.post import PostCategory, PostStatus
from folio.schemas.base import CamelModel
from folio.schemas.blog import CreatePostInput, UpdatePostInput
from folio.utils.slug import generate_slug

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

TITLE_MAX_LENGTH = 200
EXCERPT_MAX_LENGTH = 500


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: ValidationError


Result = Union[Ok[T], Err]


def _fail(field: str, message: str) -> Err:
    return Err(ValidationError(message, {field: message}))


def _check_title(title: Optional[str]) -> Optional[Err]:
    if title is None or not title.strip():
        return _fail("title", "Title is required")
    if len(title) > TITLE_MAX_LENGTH:
        return _fail("title", f"Title must be less than {TITLE_MAX_LENGTH} characters")
    return None


def _check_excerpt(excerpt: Optional[str]) -> Optional[Err]:
    if excerpt and len(excerpt) > EXCERPT_MAX_LENGTH:
        return _fail("excerpt", f"Excerpt must be less than {EXCERPT_MAX_LENGTH} characters")
    return None


def _check_tags(tags: Optional[List[str]]) -> Optional[Err]:
    # Blank names are skipped later; anything else must yield a slug
    for name in tags or []:
        if name and name.strip() and not generate_slug(name):
            return _fail("tags", f"Tag name '{name.strip()}' must contain letters or numbers")
    return None


def validate_post_input(data: CreatePostInput) -> Result[CreatePostInput]:
    failure = _check_title(data.title)
    if failure:
        return failure
    if not data.content:
        return _fail("content", "Content is required")
    failure = _check_excerpt(data.excerpt)
    if failure:
        return failure
    failure = _check_tags(data.tags)
    if failure:
        return failure
    return Ok(data)


def validate_post_update(data: UpdatePostInput) -> Result[UpdatePostInput]:
    """Apply the create checks to whichever fields the update carries."""
    present = data.model_fields_set
    if "title" in present:
        failure = _check_title(data.title)
        if failure:
            return failure
    if "content" in present and not data.content:
        return _fail("content", "Content cannot be empty")
    if "excerpt" in present:
        failure = _check_excerpt(data.excerpt)
        if failure:
            return failure
    if "tags" in present:
        failure = _check_tags(data.tags)
        if failure:
            return failure
    return Ok(data)


# Strict form schemas

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"
SLUG_CHARS = r"^[a-z0-9-]+$"


def _node_has_text(node: Any) -> bool:
    if isinstance(node, str):
        return bool(node.strip())
    if not isinstance(node, dict):
        return False
    if node.get("type") == "text":
        return bool((node.get("text") or "").strip())
    return any(_node_has_text(child) for child in node.get("content") or [])


class DocumentForm(BaseModel):
    type: str
    content: List[Any]

    @field_validator("type")
    @classmethod
    def must_be_doc(cls, value: str) -> str:
        if value != "doc":
            raise ValueError("Content must be a rich-text document")
        return value


class PostForm(CamelModel):
    title: str = Field(min_length=3, max_length=TITLE_MAX_LENGTH)
    excerpt: Optional[str] = Field(default=None, max_length=EXCERPT_MAX_LENGTH)
    content: DocumentForm
    tags: List[str] = Field(min_length=1, max_length=10)
    status: PostStatus = PostStatus.DRAFT
    category: PostCategory = PostCategory.TECHNICAL
    featured: bool = False
    cover_image_url: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("content")
    @classmethod
    def content_has_text(cls, value: DocumentForm) -> DocumentForm:
        if not value.content:
            raise ValueError("Content cannot be empty")
        if not any(_node_has_text(node) for node in value.content):
            raise ValueError("Content must contain at least some text")
        return value

    @field_validator("cover_image_url")
    @classmethod
    def cover_is_url(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        if not value.startswith(("http://", "https://")):
            raise ValueError("Cover image must be a valid URL")
        return value

    def to_input(self) -> CreatePostInput:
        return CreatePostInput(
            title=self.title,
            excerpt=self.excerpt,
            content=self.content.model_dump(),
            tags=self.tags,
            status=self.status,
            category=self.category,
            featured=self.featured,
            cover_image_url=self.cover_image_url,
        )


class PostUpdateForm(CamelModel):
    title: Optional[str] = Field(default=None, min_length=3, max_length=TITLE_MAX_LENGTH)
    excerpt: Optional[str] = Field(default=None, max_length=EXCERPT_MAX_LENGTH)
    content: Optional[DocumentForm] = None
    tags: Optional[List[str]] = Field(default=None, min_length=1, max_length=10)
    status: Optional[PostStatus] = None
    category: Optional[PostCategory] = None
    featured: Optional[bool] = None
    cover_image_url: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("cover_image_url")
    @classmethod
    def cover_is_url(cls, value: Optional[str]) -> Optional[str]:
        if value and not value.startswith(("http://", "https://")):
            raise ValueError("Cover image must be a valid URL")
        return value

    def to_input(self) -> UpdatePostInput:
        values = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if name == "content" and value is not None:
                value = value.model_dump()
            if name == "cover_image_url" and value == "":
                value = None
            values[name] = value
        return UpdatePostInput(**values)


class TagForm(CamelModel):
    name: str = Field(min_length=1, max_length=50, pattern=SLUG_CHARS)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR)


class PostFiltersForm(CamelModel):
    tag: Optional[str] = None
    category: Optional[PostCategory] = None
    search: Optional[str] = Field(default=None, max_length=100)
    author_id: Optional[str] = None
    limit: int = Field(default=20, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


def extract_validation_errors(error: SchemaError) -> Dict[str, str]:
    """Flatten a pydantic error into {"dotted.path": "message"}."""
    errors: Dict[str, str] = {}
    for issue in error.errors():
        path = ".".join(str(part) for part in issue["loc"])
        message = issue["msg"]
        # pydantic prefixes messages raised from validators
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(path, message)
    return errors


def validate_form(schema: Type[M], data: Dict[str, Any]) -> Result[M]:
    try:
        return Ok(schema.model_validate(data))
    except SchemaError as e:
        errors = extract_validation_errors(e)
        first = next(iter(errors.values()), "Invalid input")
        return Err(ValidationError(first, errors))
