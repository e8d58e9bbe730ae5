from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from vidshelf.models.videos import Video


class VideoUser(BaseModel):
    id: str = Field(..., description="Uploader ID")
    username: Optional[str] = Field(None, description="Uploader display name")


class VideoRecord(BaseModel):
    id: UUID
    user: Optional[VideoUser] = None
    title: str
    description: str
    storage_path: str = Field(..., alias="storagePath")
    download_url: str = Field(..., alias="downloadURL")
    comments: int = 0
    likes: int = 0
    dislikes: int = 0
    hearts: int = 0
    money: int = 0
    timestamp: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_model(cls, video: Video) -> "VideoRecord":
        user = None
        if video.user_id:
            user = VideoUser(id=video.user_id, username=video.username)
        return cls(
            id=video.id,
            user=user,
            title=video.title,
            description=video.description,
            storage_path=video.storage_path,
            download_url=video.download_url,
            comments=video.comments or 0,
            likes=video.likes or 0,
            dislikes=video.dislikes or 0,
            hearts=video.hearts or 0,
            money=video.money or 0,
            timestamp=video.timestamp,
        )


class UserRanking(BaseModel):
    user_id: str = Field(..., alias="userId")
    username: Optional[str] = None
    likes: int = Field(0, description="Total likes across the user's videos")

    model_config = ConfigDict(populate_by_name=True)
