import uuid

from sqlalchemy import Column, ForeignKey, Text, Uuid

from app.db.database import Base, TimestampMixin


class Tweet(TimestampMixin, Base):
    __tablename__ = "tweets"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    content = Column(Text, nullable=False)
    owner_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    def owner_identity(self):
        return self.owner_id
