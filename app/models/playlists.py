import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, Uuid

from app.db.database import Base, TimestampMixin, utcnow


class Playlist(TimestampMixin, Base):
    __tablename__ = "playlists"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    owner_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    def owner_identity(self):
        return self.owner_id


class PlaylistVideo(Base):
    __tablename__ = "playlist_videos"

    playlist_id = Column(Uuid, ForeignKey("playlists.id", ondelete="CASCADE"), primary_key=True)
    # entries may outlive the video they point to
    video_id = Column(Uuid, primary_key=True, index=True)

    position = Column(Integer, nullable=False)
    added_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
