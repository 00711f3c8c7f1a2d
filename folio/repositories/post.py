"""
Post repository.

Turns `post`, `post_tag`, `tag` and `profile` rows into `PostDto`s and owns
the post write rules:

- slugs are unique; collisions get `-1`, `-2`, ... appended
- read time is recomputed whenever content is written
- `published_at` is stamped on the first transition to published, never again
- only the author may update or delete a post
- a post row and its tag associations are written in one transaction
"""
import logging
from typing import Any, Dict, Iterable, List, Optional
from sqlmodel import Session, select
from folio.core.config import settings
from folio.core.exceptions import DuplicateKeyError, NotFoundError, PermissionDeniedError
from folio.models.common import utcnow
from folio.models.post import Post, PostStatus, PostTag
from folio.models.profile import Profile
from folio.repositories.base import BaseRepository, handle_store_errors
from folio.repositories.tag import TagRepository
from folio.schemas.blog import (
    AuthorDto,
    AuthorStats,
    BlogPostFilters,
    CreatePostInput,
    PostDto,
    TagDto,
    UpdatePostInput,
)
from folio.utils.read_time import calculate_read_time_from_document
from folio.utils.slug import generate_slug

logger = logging.getLogger(__name__)

ANONYMOUS_AUTHOR = "Anonymous"
FALLBACK_SLUG = "post"
PUBLISHED_SCAN_LIMIT = 50


class PostRepository(BaseRepository[Post]):
    model = Post

    def __init__(self, session: Session, tags: Optional[TagRepository] = None):
        super().__init__(session)
        self.tags = tags or TagRepository(session)

    # Reads

    @handle_store_errors
    def find_by_slug(self, slug: str) -> Optional[PostDto]:
        post = self.session.exec(select(Post).where(Post.slug == slug)).first()
        return self.to_dto(post) if post else None

    def find_by_id_with_relations(self, id: str) -> Optional[PostDto]:
        post = self.find_by_id(id)
        return self.to_dto(post) if post else None

    @handle_store_errors
    def find_published(self, filters: Optional[BlogPostFilters] = None) -> List[PostDto]:
        """
        Published posts, newest first.

        The tag filter runs on the fetched page, after limit/offset, so a
        tag-filtered page can hold fewer than `limit` posts even when more
        matching posts exist further on.
        """
        limit = filters.limit if filters else PUBLISHED_SCAN_LIMIT
        offset = filters.offset if filters else 0

        statement = select(Post).where(Post.status == PostStatus.PUBLISHED)
        if filters and filters.category:
            statement = statement.where(Post.category == filters.category)
        if filters and filters.author_id:
            statement = statement.where(Post.author_id == filters.author_id)
        if filters and filters.search:
            statement = statement.where(self.text_match(Post.title, filters.search))

        statement = statement.order_by(Post.published_at.desc()).offset(offset).limit(limit)
        posts = self.to_dtos(self.session.exec(statement).all())

        if filters and filters.tag:
            posts = [p for p in posts if any(t.slug == filters.tag for t in p.tags)]
        return posts

    @handle_store_errors
    def find_by_author(self, author_id: str, include_drafts: bool = True) -> List[PostDto]:
        statement = select(Post).where(Post.author_id == author_id)
        if not include_drafts:
            statement = statement.where(Post.status == PostStatus.PUBLISHED)
        statement = statement.order_by(Post.created_at.desc())
        return self.to_dtos(self.session.exec(statement).all())

    @handle_store_errors
    def find_featured(self, limit: int = 5) -> List[PostDto]:
        statement = (
            select(Post)
            .where(Post.status == PostStatus.PUBLISHED, Post.featured == True)
            .order_by(Post.published_at.desc())
            .limit(limit)
        )
        return self.to_dtos(self.session.exec(statement).all())

    # Writes

    def create_with_tags(
        self,
        data: CreatePostInput,
        author_id: str,
        tag_names: Optional[Iterable[str]] = None,
    ) -> PostDto:
        tag_ids = self._resolve_tags(data.tags if tag_names is None else tag_names)
        read_time = calculate_read_time_from_document(data.content)
        published_at = utcnow() if data.status == PostStatus.PUBLISHED else None

        for attempt in range(1, settings.SLUG_RETRY_LIMIT + 1):
            post = Post(
                title=data.title,
                slug=self.generate_unique_slug(data.title),
                excerpt=data.excerpt or None,
                content=data.content,
                author_id=author_id,
                status=data.status,
                category=data.category,
                featured=data.featured,
                cover_image_url=data.cover_image_url or None,
                read_time=read_time,
                published_at=published_at,
            )
            try:
                self._insert_with_tags(post, tag_ids)
            except DuplicateKeyError:
                # Another writer took the slug between the probe and the insert
                logger.warning("Slug %r taken concurrently (attempt %d), retrying", post.slug, attempt)
                continue

            logger.info("Created post %s (%s) for author %s", post.id, post.slug, author_id)
            created = self.find_by_id_with_relations(post.id)
            if created is None:
                raise NotFoundError("Failed to fetch created post")
            return created

        raise DuplicateKeyError("Could not allocate a unique slug for this title")

    def update_with_tags(self, id: str, updates: UpdatePostInput, author_id: str) -> PostDto:
        existing = self._get_owned(id, author_id, "update")
        current_title = existing.title
        already_published = existing.published_at is not None

        fields: Dict[str, Any] = updates.model_dump(exclude_unset=True)
        tag_names = fields.pop("tags", None)
        tag_ids = self._resolve_tags(tag_names) if tag_names is not None else None

        values: Dict[str, Any] = {}
        if fields.get("title"):
            values["title"] = fields["title"]
        if "excerpt" in fields:
            values["excerpt"] = fields["excerpt"]
        if fields.get("content"):
            values["content"] = fields["content"]
            values["read_time"] = calculate_read_time_from_document(fields["content"])
        if fields.get("status"):
            values["status"] = fields["status"]
            # First publish only; re-publishing keeps the original date
            if fields["status"] == PostStatus.PUBLISHED and not already_published:
                values["published_at"] = utcnow()
        if fields.get("category"):
            values["category"] = fields["category"]
        if fields.get("featured") is not None:
            values["featured"] = fields["featured"]
        if "cover_image_url" in fields:
            values["cover_image_url"] = fields["cover_image_url"] or None

        retitled = "title" in values and values["title"] != current_title

        for attempt in range(1, settings.SLUG_RETRY_LIMIT + 1):
            if retitled:
                values["slug"] = self.generate_unique_slug(values["title"], exclude_id=id)
            try:
                self._apply_update(id, values, tag_ids)
            except DuplicateKeyError:
                if not retitled:
                    raise
                logger.warning("Slug %r taken concurrently (attempt %d), retrying", values["slug"], attempt)
                continue

            logger.info("Updated post %s (%s)", id, ", ".join(sorted(values)) or "tags only")
            updated = self.find_by_id_with_relations(id)
            if updated is None:
                raise NotFoundError("Failed to fetch updated post")
            return updated

        raise DuplicateKeyError("Could not allocate a unique slug for this title")

    def delete_post(self, id: str, author_id: str) -> None:
        self._get_owned(id, author_id, "delete")
        self.delete(id)
        logger.info("Deleted post %s", id)

    @handle_store_errors
    def get_stats(self, author_id: str) -> AuthorStats:
        rows = self.session.exec(select(Post.status, Post.featured).where(Post.author_id == author_id)).all()

        stats = AuthorStats(total=len(rows))
        for status, featured in rows:
            if status == PostStatus.PUBLISHED:
                stats.published += 1
            if status == PostStatus.DRAFT:
                stats.drafts += 1
            if featured:
                stats.featured += 1
        return stats

    @handle_store_errors
    def increment_view_count(self, id: str) -> None:
        # Read-then-write: concurrent readers of the same post can lose increments
        post = self.session.get(Post, id)
        if post is None:
            raise NotFoundError("Post not found")
        post.view_count = (post.view_count or 0) + 1
        self.session.add(post)
        self.session.commit()

    # Slugs

    @handle_store_errors
    def generate_unique_slug(self, title: str, exclude_id: Optional[str] = None) -> str:
        """Probe `slug`, `slug-1`, `slug-2`, ... until one is free (or is this post's own)."""
        base_slug = generate_slug(title) or FALLBACK_SLUG
        slug = base_slug
        counter = 0
        while True:
            owner = self.session.exec(select(Post.id).where(Post.slug == slug)).first()
            if owner is None or (exclude_id and owner == exclude_id):
                return slug
            counter += 1
            slug = f"{base_slug}-{counter}"

    # Internals

    def _get_owned(self, id: str, author_id: str, action: str) -> Post:
        post = self.find_by_id(id)
        if post is None:
            raise NotFoundError("Post not found")
        if post.author_id != author_id:
            raise PermissionDeniedError(f"You do not have permission to {action} this post")
        return post

    def _resolve_tags(self, tag_names: Iterable[str]) -> List[str]:
        """Find-or-create each tag, returning ids in first-seen order without repeats."""
        tag_ids: List[str] = []
        for name in tag_names or []:
            if not name or not name.strip():
                continue
            tag = self.tags.find_or_create(name)
            if tag.id not in tag_ids:
                tag_ids.append(tag.id)
        return tag_ids

    def _link_tags(self, post_id: str, tag_ids: Iterable[str]) -> None:
        for tag_id in tag_ids:
            # Idempotent per (post, tag)
            if self.session.get(PostTag, (post_id, tag_id)) is None:
                self.session.add(PostTag(post_id=post_id, tag_id=tag_id))

    @handle_store_errors
    def _insert_with_tags(self, post: Post, tag_ids: List[str]) -> None:
        self.session.add(post)
        self.session.flush()
        self._link_tags(post.id, tag_ids)
        self.session.commit()

    @handle_store_errors
    def _apply_update(self, id: str, values: Dict[str, Any], tag_ids: Optional[List[str]]) -> None:
        post = self.session.get(Post, id)
        if post is None:
            # Deleted between the ownership check and now
            raise NotFoundError("Post not found")

        for key, value in values.items():
            setattr(post, key, value)
        post.updated_at = utcnow()
        self.session.add(post)

        if tag_ids is not None:
            for link in self.session.exec(select(PostTag).where(PostTag.post_id == id)).all():
                self.session.delete(link)
            self.session.flush()
            self._link_tags(id, tag_ids)

        self.session.commit()

    # DTO assembly

    def _authors(self, author_ids: Iterable[str]) -> Dict[str, Profile]:
        author_ids = list(set(author_ids))
        if not author_ids:
            return {}
        profiles = self.session.exec(select(Profile).where(Profile.id.in_(author_ids))).all()
        return {profile.id: profile for profile in profiles}

    def to_dto(self, post: Post) -> PostDto:
        return self.to_dtos([post])[0]

    def to_dtos(self, posts: Iterable[Post]) -> List[PostDto]:
        posts = list(posts)
        tags_by_post = self.tags.get_by_posts(p.id for p in posts)
        authors = self._authors(p.author_id for p in posts)
        return [self._build_dto(p, tags_by_post.get(p.id, []), authors.get(p.author_id)) for p in posts]

    @staticmethod
    def _build_dto(post: Post, tags: List[TagDto], profile: Optional[Profile]) -> PostDto:
        return PostDto(
            id=post.id,
            title=post.title,
            slug=post.slug,
            excerpt=post.excerpt or "",
            content=post.content,
            author=AuthorDto(
                id=post.author_id,
                name=(profile.full_name if profile else None) or ANONYMOUS_AUTHOR,
                avatar=profile.avatar_url if profile else None,
            ),
            cover_image=post.cover_image_url,
            tags=tags,
            category=post.category,
            status=post.status,
            featured=post.featured,
            published_at=post.published_at,
            created_at=post.created_at,
            updated_at=post.updated_at,
            read_time=post.read_time,
            view_count=post.view_count or 0,
        )
