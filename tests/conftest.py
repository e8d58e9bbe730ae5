import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from vidshelf.api.deps import get_blob_storage, get_upload_settings, get_video_repository
from vidshelf.core.config import StorageSettings, UploadSettings
from vidshelf.core.errors import StorageWriteError
from vidshelf.db.database import init_models
from vidshelf.main import app
from vidshelf.models.videos import Video


class FakeBlobStorage:
    def __init__(self, fail: bool = False):
        self.settings = StorageSettings(STORAGE_BUCKET="test-bucket")
        self.fail = fail
        self.writes = []

    def public_url(self, key: str) -> str:
        return self.settings.public_url(key)

    async def write_public(self, key, data, content_type):
        if self.fail:
            raise StorageWriteError("Error uploading: bucket unavailable")
        self.writes.append((key, data, content_type))
        return self.public_url(key)


class FakeVideoRepository:
    """In-memory store that assigns ids and strictly increasing timestamps."""

    def __init__(self):
        self.videos = []
        self.fail_writes = False
        self.fail_reads = False
        self.error = SQLAlchemyError("metadata store unavailable")
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def add(self, **fields) -> Video:
        fields.setdefault("title", "Untitled")
        fields.setdefault("description", "No description")
        fields.setdefault("storage_path", f"videos/{len(self.videos)}-seed.mp4")
        fields.setdefault("download_url", f"https://storage.googleapis.com/test-bucket/{fields['storage_path']}")
        video = Video(**fields)
        video.id = uuid.uuid4()
        self._clock += timedelta(seconds=1)
        video.timestamp = self._clock
        self.videos.append(video)
        return video

    async def create_video(self, **fields) -> Video:
        if self.fail_writes:
            raise self.error
        return self.add(**fields)

    async def list_videos(self):
        if self.fail_reads:
            raise self.error
        return sorted(self.videos, key=lambda v: v.timestamp, reverse=True)

    async def all_videos(self):
        if self.fail_reads:
            raise self.error
        return list(self.videos)


@pytest.fixture
def storage():
    return FakeBlobStorage()


@pytest.fixture
def repository():
    return FakeVideoRepository()


@pytest.fixture
def upload_settings():
    return UploadSettings(MAX_UPLOAD_BYTES=1024, FORM_OVERHEAD_BYTES=2048)


@pytest.fixture
def client(storage, repository, upload_settings):
    app.dependency_overrides[get_blob_storage] = lambda: storage
    app.dependency_overrides[get_video_repository] = lambda: repository
    app.dependency_overrides[get_upload_settings] = lambda: upload_settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
async def db_session():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )
    await init_models(engine)
    sessionmaker = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with sessionmaker() as session:
        yield session
    await engine.dispose()
