import uuid

from sqlalchemy import Column, DateTime, Integer, String, Uuid, func

from vidshelf.db.database import Base


class Video(Base):
    __tablename__ = "videos"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # written by other collaborators too, so either may be missing
    user_id = Column(String, nullable=True, index=True)
    username = Column(String, nullable=True)

    title = Column(String, nullable=False, default="Untitled")
    description = Column(String, nullable=False, default="No description")

    storage_path = Column(String, nullable=False, unique=True)
    download_url = Column(String, nullable=False)

    comments = Column(Integer, nullable=False, default=0)
    likes = Column(Integer, nullable=True, default=0)
    dislikes = Column(Integer, nullable=False, default=0)
    hearts = Column(Integer, nullable=False, default=0)
    money = Column(Integer, nullable=False, default=0)

    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
