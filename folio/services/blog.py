import logging
from typing import List, Optional
from fastapi import BackgroundTasks
from sqlmodel import Session
from folio.core.exceptions import BlogError
from folio.repositories.post import PostRepository
from folio.repositories.tag import TagRepository
from folio.schemas.blog import (
    AuthorStats,
    BlogPostFilters,
    CreatePostInput,
    PostDto,
    TagDto,
    TagWithCount,
    UpdatePostInput,
)
from folio.validation import Err, validate_post_input, validate_post_update

logger = logging.getLogger(__name__)


class BlogService:
    """
    Entry point for everything that reads or writes blog posts and tags.

    Validates input before it reaches a repository, so a rejected request
    never leaves a partial write behind. Ownership is enforced one layer
    down, in the post repository.
    """

    def __init__(self, posts: PostRepository, tags: TagRepository):
        self.posts = posts
        self.tags = tags

    # Posts

    def get_published_posts(self, filters: Optional[BlogPostFilters] = None) -> List[PostDto]:
        return self.posts.find_published(filters)

    def get_featured_posts(self, limit: int = 5) -> List[PostDto]:
        return self.posts.find_featured(limit)

    def get_post_by_slug(self, slug: str, background_tasks: Optional[BackgroundTasks] = None) -> Optional[PostDto]:
        """
        Fetch a post by slug and count the view.

        With `background_tasks` the view is recorded after the response has
        been sent. Without it the increment runs inline, so the call blocks
        on that write before returning; HTTP handlers should always pass
        their `BackgroundTasks`. Either way a failure to count is logged and
        never reaches the caller.
        """
        post = self.posts.find_by_slug(slug)
        if post:
            if background_tasks is not None:
                background_tasks.add_task(self.record_view, post.id)
            else:
                self.record_view(post.id)
        return post

    def record_view(self, post_id: str) -> None:
        try:
            self.posts.increment_view_count(post_id)
        except BlogError as e:
            logger.warning("Failed to record view for post %s: %s", post_id, e.message)
        except Exception:
            logger.exception("Failed to record view for post %s", post_id)

    def get_post_by_id(self, id: str) -> Optional[PostDto]:
        return self.posts.find_by_id_with_relations(id)

    def get_author_posts(self, author_id: str, include_drafts: bool = True) -> List[PostDto]:
        return self.posts.find_by_author(author_id, include_drafts)

    def create_post(self, data: CreatePostInput, author_id: str) -> PostDto:
        result = validate_post_input(data)
        if isinstance(result, Err):
            raise result.error
        return self.posts.create_with_tags(data, author_id, data.tags)

    def update_post(self, id: str, data: UpdatePostInput, author_id: str) -> PostDto:
        result = validate_post_update(data)
        if isinstance(result, Err):
            raise result.error
        return self.posts.update_with_tags(id, data, author_id)

    def delete_post(self, id: str, author_id: str) -> None:
        self.posts.delete_post(id, author_id)

    def get_author_stats(self, author_id: str) -> AuthorStats:
        return self.posts.get_stats(author_id)

    def search_posts(self, term: str, limit: int = 20) -> List[PostDto]:
        return self.posts.find_published(BlogPostFilters(search=term, limit=limit))

    def get_posts_by_tag(self, tag_slug: str, limit: int = 20) -> List[PostDto]:
        # Same caveat as the tag filter: the page is cut before filtering
        posts = self.posts.find_published(BlogPostFilters(limit=limit))
        return [p for p in posts if any(t.slug == tag_slug for t in p.tags)]

    def get_related_posts(self, post_id: str, limit: int = 4) -> List[PostDto]:
        """
        Published posts sharing tags with `post_id`, most shared tags first.

        Candidates with no tag in common are dropped. Equal scores keep the
        order the store returned them in.
        """
        post = self.get_post_by_id(post_id)
        if not post:
            return []

        tag_slugs = {t.slug for t in post.tags}
        if not tag_slugs:
            return []

        scored = []
        for candidate in self.posts.find_published():
            if candidate.id == post_id:
                continue
            score = sum(1 for t in candidate.tags if t.slug in tag_slugs)
            if score > 0:
                scored.append((score, candidate))

        scored.sort(key=lambda item: item[0], reverse=True)
        return [candidate for _, candidate in scored[:limit]]

    # Tags

    def get_all_tags(self) -> List[TagWithCount]:
        return self.tags.get_all_with_counts()

    def get_popular_tags(self, limit: int = 20) -> List[TagWithCount]:
        return self.tags.get_popular(limit)

    def update_tag(self, id: str, name: Optional[str] = None, color: Optional[str] = None) -> TagDto:
        return self.tags.update_tag(id, name=name, color=color)


def create_blog_service(session: Session) -> BlogService:
    tags = TagRepository(session)
    return BlogService(PostRepository(session, tags), tags)
