from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidshelf.core.config import StorageSettings, UploadSettings
from vidshelf.db.database import get_db
from vidshelf.services.storage_service import BlobStorage
from vidshelf.services.video_repository import VideoRepository
from vidshelf.services.video_service import VideoService


@lru_cache
def get_storage_settings() -> StorageSettings:
    return StorageSettings()


@lru_cache
def get_upload_settings() -> UploadSettings:
    return UploadSettings()


@lru_cache
def get_blob_storage() -> BlobStorage:
    return BlobStorage(get_storage_settings())


def get_video_repository(db: AsyncSession = Depends(get_db)) -> VideoRepository:
    return VideoRepository(db)


def get_video_service(
    storage: BlobStorage = Depends(get_blob_storage),
    repository: VideoRepository = Depends(get_video_repository),
    storage_settings: StorageSettings = Depends(get_storage_settings),
) -> VideoService:
    return VideoService(storage, repository, key_prefix=storage_settings.key_prefix)
