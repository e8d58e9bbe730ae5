from typing import List

from fastapi import APIRouter, Depends, Request

from vidshelf.api.deps import get_upload_settings, get_video_service
from vidshelf.core.config import UploadSettings
from vidshelf.schemas.video import UserRanking, VideoRecord
from vidshelf.services.video_service import VideoService
from vidshelf.utils.uploads import read_upload_form

videos_router = APIRouter()


@videos_router.post("/upload", response_model=VideoRecord)
async def upload_video(
    request: Request,
    service: VideoService = Depends(get_video_service),
    upload_settings: UploadSettings = Depends(get_upload_settings),
):
    form = await read_upload_form(
        request,
        max_upload_bytes=upload_settings.max_upload_bytes,
        form_overhead_bytes=upload_settings.form_overhead_bytes,
    )
    return await service.upload_video(
        form.file,
        user_id=form.get("userId"),
        username=form.get("username"),
        title=form.get("title"),
        description=form.get("description"),
    )


@videos_router.get("/videos", response_model=List[VideoRecord])
async def list_videos(service: VideoService = Depends(get_video_service)):
    return await service.list_videos()


@videos_router.get("/ranked-users", response_model=List[UserRanking])
async def ranked_users(service: VideoService = Depends(get_video_service)):
    return await service.rank_users()
