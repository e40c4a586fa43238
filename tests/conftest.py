import os
import tempfile
from datetime import datetime, timedelta, timezone

os.environ.setdefault("APP_NAME", "streamhub-test")
os.environ.setdefault("APP_PORT", "8000")
os.environ.setdefault("SECRET_KEY", "test-secret-key-test-secret-key-0123456789")
os.environ.setdefault("LOG_FILE", os.path.join(tempfile.gettempdir(), "streamhub-tests.log"))

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.database import get_db, init_models
from app.main import create_app
from app.models import Comment, Tweet, Users, Video
from app.utils.security import create_access_token

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def sessionmaker(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def session(sessionmaker):
    async with sessionmaker() as session:
        yield session


@pytest.fixture
def make_user(session):
    async def factory(username: str, full_name: str = None) -> Users:
        user = Users(username=username, full_name=full_name or username.title(), avatar=f"https://cdn.test/{username}.png")
        session.add(user)
        await session.commit()
        return user
    return factory


@pytest.fixture
def make_video(session):
    counter = {"n": 0}

    async def factory(owner: Users, title: str = None, is_published: bool = True, views: int = 0, **extra) -> Video:
        counter["n"] += 1
        n = counter["n"]
        video = Video(
            owner_id=extra.pop("owner_id", owner.id),
            title=title or f"Video {n}",
            description=f"Description {n}",
            video_file=f"https://cdn.test/video-{n}.mp4",
            thumbnail=f"https://cdn.test/thumb-{n}.jpg",
            duration=60.0 + n,
            views=views,
            is_published=is_published,
            created_at=extra.pop("created_at", BASE_TIME + timedelta(minutes=n)),
            **extra,
        )
        session.add(video)
        await session.commit()
        return video
    return factory


@pytest.fixture
def make_comment(session):
    async def factory(video: Video, owner: Users, content: str = "Nice video", created_at: datetime = None) -> Comment:
        comment = Comment(video_id=video.id, owner_id=owner.id, content=content)
        if created_at is not None:
            comment.created_at = created_at
        session.add(comment)
        await session.commit()
        return comment
    return factory


@pytest.fixture
def make_tweet(session):
    async def factory(owner: Users, content: str = "hello", created_at: datetime = None) -> Tweet:
        tweet = Tweet(owner_id=owner.id, content=content)
        if created_at is not None:
            tweet.created_at = created_at
        session.add(tweet)
        await session.commit()
        return tweet
    return factory


@pytest.fixture
def auth_headers():
    def build(user: Users) -> dict:
        return {"Authorization": f"Bearer {create_access_token({'id': str(user.id)})}"}
    return build


@pytest_asyncio.fixture
async def client(sessionmaker):
    app = create_app()

    async def override_get_db():
        async with sessionmaker() as db:
            yield db

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http
