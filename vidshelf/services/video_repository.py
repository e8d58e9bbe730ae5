from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vidshelf.models.videos import Video


class VideoRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_video(self, **fields) -> Video:
        video = Video(**fields)
        self.db.add(video)
        try:
            # load the store-assigned id and timestamp before committing
            await self.db.flush()
            await self.db.refresh(video)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return video

    async def list_videos(self) -> List[Video]:
        result = await self.db.execute(
            select(Video).order_by(Video.timestamp.desc())
        )
        return list(result.scalars().all())

    async def all_videos(self) -> List[Video]:
        result = await self.db.execute(select(Video))
        return list(result.scalars().all())
