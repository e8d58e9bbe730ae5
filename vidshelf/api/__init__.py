from fastapi import APIRouter
from vidshelf.api import videos

api_router = APIRouter()

api_router.include_router(videos.videos_router, tags=["videos"])

__all__ = ["api_router"]
