import uuid

from sqlalchemy import Column, ForeignKey, Text, Uuid

from app.db.database import Base, TimestampMixin


class Comment(TimestampMixin, Base):
    __tablename__ = "comments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    content = Column(Text, nullable=False)

    # no foreign key: the video row is removed before its comments
    video_id = Column(Uuid, nullable=False, index=True)
    owner_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    def owner_identity(self):
        return self.owner_id
