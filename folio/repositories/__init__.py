from folio.repositories.base import BaseRepository, handle_store_errors, translate_error
from folio.repositories.media import MediaRepository
from folio.repositories.post import PostRepository
from folio.repositories.tag import TagRepository

__all__ = [
    "BaseRepository",
    "handle_store_errors",
    "translate_error",
    "MediaRepository",
    "PostRepository",
    "TagRepository",
]
