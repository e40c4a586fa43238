"""
Seed data loader.
"""

import json
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from app.models import Tweet, Users, Video
from app.services.data_loader_service import DataLoaderService


def seed_payload():
    return {
        "users": [
            {
                "id": str(uuid4()),
                "username": "Seeded",
                "full_name": "Seeded User",
                "created_at": "2025-11-26T11:40:09.349384+00:00",
                "videos": [
                    {
                        "id": str(uuid4()),
                        "video_file": "https://cdn.test/a.mp4",
                        "thumbnail": "https://cdn.test/a.jpg",
                        "title": "Seeded video",
                        "duration": 33.5,
                        "views": 120,
                    }
                ],
                "tweets": [
                    {"id": str(uuid4()), "content": "seeded tweet", "created_at": "2025-11-27 08:00:00"}
                ],
            },
            {"id": "broken", "username": "nobody"},
        ]
    }


async def total(session, model) -> int:
    return (await session.execute(select(func.count()).select_from(model))).scalar_one()


class TestDataLoader:

    async def test_loads_users_videos_and_tweets(self, session):
        loaded = await DataLoaderService(session).load(seed_payload())

        assert loaded == {"users": 1, "videos": 1, "tweets": 1}
        user = (await session.execute(select(Users))).scalar_one()
        assert user.username == "seeded"
        video = (await session.execute(select(Video))).scalar_one()
        assert video.owner_id == user.id
        assert video.views == 120

    async def test_loading_twice_skips_existing_rows(self, session, tmp_path):
        path = tmp_path / "seed.json"
        path.write_text(json.dumps(seed_payload()), encoding="utf-8")
        loader = DataLoaderService(session)

        await loader.load_from_json_file(str(path))
        again = await loader.load_from_json_file(str(path))

        assert again == {"users": 0, "videos": 0, "tweets": 0}
        assert await total(session, Users) == 1
        assert await total(session, Tweet) == 1

    async def test_missing_file(self, session):
        with pytest.raises(FileNotFoundError):
            await DataLoaderService(session).load_from_json_file("/nonexistent/seed.json")

    async def test_empty_payload(self, session):
        assert await DataLoaderService(session).load({}) == {"users": 0, "videos": 0, "tweets": 0}
