import uuid

from sqlalchemy import Boolean, Column, Float, ForeignKey, Integer, String, Text, Uuid

from app.db.database import Base, TimestampMixin


class Video(TimestampMixin, Base):
    __tablename__ = "videos"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    owner_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    video_file = Column(String, nullable=False)
    thumbnail = Column(String, nullable=False)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    duration = Column(Float, nullable=False, default=0)

    views = Column(Integer, nullable=False, default=0)
    is_published = Column(Boolean, nullable=False, default=True, index=True)

    def owner_identity(self):
        return self.owner_id
