import enum
import uuid

from sqlalchemy import Column, Enum, ForeignKey, UniqueConstraint, Uuid

from app.db.database import Base, TimestampMixin


class LikeTargetType(str, enum.Enum):
    VIDEO = "video"
    COMMENT = "comment"
    TWEET = "tweet"


class Like(TimestampMixin, Base):
    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("liked_by_id", "target_type", "target_id", name="uq_likes_liked_by_target"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    liked_by_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    target_type = Column(Enum(LikeTargetType, name="like_target_type"), nullable=False)
    target_id = Column(Uuid, nullable=False, index=True)
