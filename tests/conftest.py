"""
conftest.py
-----------
Shared pytest fixtures for Folio tests.

Provides fixtures for:
- In-memory SQLite database and session
- Repositories and services wired to that session
- An in-memory blob store standing in for S3
- Rich-text document and upload factories
- A FastAPI test client with bearer tokens
"""
import pytest
from typing import Dict, Optional
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session
from folio.core.exceptions import StorageError
from folio.core.security import create_access_token
from folio.db.session import create_db_and_tables, create_db_engine, get_session
from folio.main import app
from folio.models.profile import Profile
from folio.repositories.media import MediaRepository
from folio.repositories.post import PostRepository
from folio.repositories.tag import TagRepository
from folio.schemas.blog import CreatePostInput
from folio.schemas.media import FileUpload
from folio.services.blog import BlogService
from folio.services.storage import StoredObject, get_storage
from folio.services.upload import UploadService

AUTHOR_ID = "author-1"
OTHER_AUTHOR_ID = "author-2"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


# ----- Blob Store Double -----

class FakeStorage:
    """In-memory replacement for S3Storage with the same call surface."""

    base_url = "https://cdn.test"

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.fail_uploads = False
        self.fail_removes = False

    @staticmethod
    def object_key(folder: str, path: str) -> str:
        return f"{folder}/{path}"

    def upload(self, folder: str, path: str, content: bytes, content_type: str) -> StoredObject:
        if self.fail_uploads:
            raise StorageError("Upload failed: bucket unavailable")
        key = self.object_key(folder, path)
        self.objects[key] = content
        return StoredObject(path=path, full_path=key, public_url=self.get_public_url(folder, path))

    def remove(self, folder: str, path: str) -> None:
        if self.fail_removes:
            raise StorageError("Delete failed: bucket unavailable")
        self.objects.pop(self.object_key(folder, path), None)

    def get_public_url(self, folder: str, path: str) -> str:
        return f"{self.base_url}/{self.object_key(folder, path)}"


# ----- Database Fixtures -----

@pytest.fixture
def engine():
    """Fresh in-memory database per test; StaticPool keeps one shared connection."""
    db_engine = create_db_engine("sqlite://", poolclass=StaticPool)
    create_db_and_tables(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def db_session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def author_profile(db_session):
    profile = Profile(id=AUTHOR_ID, full_name="Ada Writer", avatar_url="https://cdn.test/ada.png")
    db_session.add(profile)
    db_session.commit()
    return profile


# ----- Repository & Service Fixtures -----

@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def tag_repo(db_session):
    return TagRepository(db_session)


@pytest.fixture
def post_repo(db_session, tag_repo):
    return PostRepository(db_session, tag_repo)


@pytest.fixture
def media_repo(db_session, storage):
    return MediaRepository(db_session, storage)


@pytest.fixture
def blog_service(post_repo, tag_repo):
    return BlogService(post_repo, tag_repo)


@pytest.fixture
def upload_service(media_repo):
    return UploadService(media_repo)


# ----- Data Factories -----

def make_doc(*paragraphs: str) -> dict:
    """TipTap document with one paragraph per string."""
    return {
        "type": "doc",
        "content": [
            {"type": "paragraph", "content": [{"type": "text", "text": text}]}
            for text in paragraphs
        ],
    }


@pytest.fixture
def doc():
    return make_doc


@pytest.fixture
def post_input():
    """Factory for CreatePostInput with sensible defaults."""

    def factory(title: str = "Hello World", **overrides) -> CreatePostInput:
        values = {
            "title": title,
            "excerpt": "A short summary",
            "content": make_doc("Some words to read."),
            "tags": [],
        }
        values.update(overrides)
        return CreatePostInput(**values)

    return factory


@pytest.fixture
def make_upload():
    def factory(
        filename: str = "photo.png",
        content_type: str = "image/png",
        content: Optional[bytes] = None,
    ) -> FileUpload:
        return FileUpload(filename=filename, content_type=content_type, content=PNG_BYTES if content is None else content)

    return factory


# ----- HTTP Fixtures -----

@pytest.fixture
def client(db_session, storage):
    """TestClient sharing the test session and blob store; lifespan is not run."""
    app.dependency_overrides[get_session] = lambda: db_session
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def factory(user_id: str = AUTHOR_ID) -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return factory
