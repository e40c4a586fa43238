import uuid

from sqlalchemy import Column, String, Uuid
from sqlalchemy.orm import validates

from app.db.database import Base, TimestampMixin


class Users(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    username = Column(String(64), unique=True, index=True, nullable=False)
    full_name = Column(String(128), nullable=False)
    avatar = Column(String, nullable=True)
    cover_image = Column(String, nullable=True)

    @validates("username")
    def _normalize_username(self, key, value):
        return value.strip().lower() if value else value
