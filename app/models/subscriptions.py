import uuid

from sqlalchemy import CheckConstraint, Column, ForeignKey, UniqueConstraint, Uuid

from app.db.database import Base, TimestampMixin


class Subscription(TimestampMixin, Base):
    __tablename__ = "subscriptions"
    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriptions_subscriber_channel"),
        CheckConstraint("subscriber_id <> channel_id", name="ck_subscriptions_not_self"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    subscriber_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    channel_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
