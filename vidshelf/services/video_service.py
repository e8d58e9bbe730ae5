import time
from typing import Callable, Dict, List, Optional

from loguru import logger

from vidshelf.core.errors import MetadataWriteError, QueryError, ValidationError
from vidshelf.schemas.video import UserRanking, VideoRecord
from vidshelf.services.storage_service import BlobStorage
from vidshelf.services.video_repository import VideoRepository
from vidshelf.utils.uploads import UploadedVideo


def epoch_ms() -> int:
    return time.time_ns() // 1_000_000


class VideoService:
    def __init__(
        self,
        storage: BlobStorage,
        repository: VideoRepository,
        key_prefix: str = "videos",
        clock: Callable[[], int] = epoch_ms,
    ):
        self.storage = storage
        self.repository = repository
        self.key_prefix = key_prefix
        self.clock = clock

    def storage_key(self, filename: str) -> str:
        return f"{self.key_prefix}/{self.clock()}-{filename}"

    async def upload_video(
        self,
        file: Optional[UploadedVideo],
        user_id: Optional[str],
        username: Optional[str],
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> VideoRecord:
        if file is None:
            logger.warning("Upload rejected: no file")
            raise ValidationError("No file uploaded.")
        if not user_id or not username:
            logger.warning("Upload rejected: missing user fields")
            raise ValidationError("User ID and username are required.")

        key = self.storage_key(file.filename)
        download_url = await self.storage.write_public(key, file.data, file.content_type)

        try:
            video = await self.repository.create_video(
                user_id=user_id,
                username=username,
                title=title or "Untitled",
                description=description or "No description",
                storage_path=key,
                download_url=download_url,
                comments=0,
                likes=0,
                dislikes=0,
                hearts=0,
                money=0,
            )
        except Exception as e:
            # the object stays in the bucket without a record
            logger.exception(f"Metadata write failed for {key}: {e}")
            raise MetadataWriteError(f"Error saving metadata: {e}") from e

        logger.info(f"Uploaded video {video.id} for user {user_id} at {key}")
        return VideoRecord.from_model(video)

    async def list_videos(self) -> List[VideoRecord]:
        try:
            videos = await self.repository.list_videos()
        except Exception as e:
            logger.exception(f"Error fetching videos: {e}")
            raise QueryError(f"Error fetching videos: {e}") from e

        logger.debug(f"Fetched {len(videos)} videos")
        return [VideoRecord.from_model(video) for video in videos]

    async def rank_users(self) -> List[UserRanking]:
        try:
            videos = await self.repository.all_videos()
        except Exception as e:
            logger.exception(f"Error ranking users: {e}")
            raise QueryError(f"Error ranking users: {e}") from e

        stats: Dict[str, UserRanking] = {}
        for video in videos:
            if not video.user_id:
                continue
            if video.user_id not in stats:
                stats[video.user_id] = UserRanking(user_id=video.user_id, username=video.username, likes=0)
            stats[video.user_id].likes += video.likes or 0

        logger.debug(f"Ranked {len(stats)} users over {len(videos)} videos")
        return sorted(stats.values(), key=lambda r: (-r.likes, r.user_id))
