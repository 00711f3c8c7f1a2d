import logging
from typing import Dict, Iterable, List, Optional
from sqlalchemy import func
from sqlmodel import Session, select
from folio.core.config import settings
from folio.core.exceptions import DuplicateKeyError, ValidationError
from folio.models.post import PostTag
from folio.models.tag import Tag
from folio.repositories.base import BaseRepository, handle_store_errors
from folio.schemas.blog import TagDto, TagWithCount
from folio.utils.slug import generate_slug

logger = logging.getLogger(__name__)


class TagRepository(BaseRepository[Tag]):
    """Tag vocabulary and its many-to-many association with posts."""

    model = Tag

    def __init__(self, session: Session):
        super().__init__(session)

    @handle_store_errors
    def find_by_slug(self, slug: str) -> Optional[TagDto]:
        tag = self.session.exec(select(Tag).where(Tag.slug == slug)).first()
        return self.to_dto(tag) if tag else None

    @handle_store_errors
    def find_by_name(self, name: str) -> Optional[TagDto]:
        tag = self.session.exec(select(Tag).where(Tag.name == name)).first()
        return self.to_dto(tag) if tag else None

    def find_or_create(self, name: str, color: Optional[str] = None) -> TagDto:
        """
        Return the tag called `name`, creating it if it does not exist yet.

        Two callers racing on the same new name both reach the insert; the
        loser hits the unique constraint and picks up the winner's row.
        """
        name = (name or "").strip()
        existing = self.find_by_name(name)
        if existing:
            return existing

        slug = generate_slug(name)
        if not slug:
            raise ValidationError(f"Tag name '{name}' must contain letters or numbers", {"tags": "Invalid tag name"})

        try:
            created = self.create({
                "name": name,
                "slug": slug,
                "color": color or settings.DEFAULT_TAG_COLOR,
            })
        except DuplicateKeyError:
            winner = self.find_by_slug(slug) or self.find_by_name(name)
            if winner is None:
                raise
            logger.info("Tag %r already created concurrently, reusing %s", name, winner.id)
            return winner

        logger.info("Created tag %r (%s)", name, created.id)
        return self.to_dto(created)

    @handle_store_errors
    def get_all(self) -> List[TagDto]:
        tags = self.session.exec(select(Tag).order_by(Tag.name)).all()
        return [self.to_dto(tag) for tag in tags]

    @handle_store_errors
    def get_all_with_counts(self) -> List[TagWithCount]:
        statement = (
            select(Tag, func.count(PostTag.post_id))
            .outerjoin(PostTag, PostTag.tag_id == Tag.id)
            .group_by(Tag.id)
            .order_by(Tag.name)
        )
        return [
            TagWithCount(**self.to_dto(tag).model_dump(), post_count=count)
            for tag, count in self.session.exec(statement).all()
        ]

    def get_popular(self, limit: int = 20) -> List[TagWithCount]:
        # sorted() is stable, so equal counts stay in name order
        tags = sorted(self.get_all_with_counts(), key=lambda t: t.post_count, reverse=True)
        return tags[:limit]

    @handle_store_errors
    def get_by_post(self, post_id: str) -> List[TagDto]:
        statement = (
            select(Tag)
            .join(PostTag, PostTag.tag_id == Tag.id)
            .where(PostTag.post_id == post_id)
            .order_by(Tag.name)
        )
        return [self.to_dto(tag) for tag in self.session.exec(statement).all()]

    @handle_store_errors
    def get_by_posts(self, post_ids: Iterable[str]) -> Dict[str, List[TagDto]]:
        """Tags for several posts in one query, keyed by post id."""
        post_ids = list(post_ids)
        result: Dict[str, List[TagDto]] = {post_id: [] for post_id in post_ids}
        if not post_ids:
            return result

        statement = (
            select(PostTag.post_id, Tag)
            .join(Tag, PostTag.tag_id == Tag.id)
            .where(PostTag.post_id.in_(post_ids))
            .order_by(Tag.name)
        )
        for post_id, tag in self.session.exec(statement).all():
            result[post_id].append(self.to_dto(tag))
        return result

    def update_tag(self, id: str, name: Optional[str] = None, color: Optional[str] = None) -> TagDto:
        values = {}
        if name:
            slug = generate_slug(name)
            if not slug:
                raise ValidationError(f"Tag name '{name}' must contain letters or numbers", {"name": "Invalid tag name"})
            values["name"] = name
            values["slug"] = slug
        if color:
            values["color"] = color

        return self.to_dto(self.update(id, values))

    def delete_tag(self, id: str) -> None:
        # post_tag rows go with it (ON DELETE CASCADE), posts stay
        self.delete(id)
        logger.info("Deleted tag %s", id)

    @staticmethod
    def to_dto(tag: Tag) -> TagDto:
        return TagDto(id=tag.id, name=tag.name, slug=tag.slug, color=tag.color)
