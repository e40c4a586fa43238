import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Type
from uuid import UUID

from dateutil import parser as date_parser
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.tweets import Tweet
from app.models.users import Users
from app.models.videos import Video


class DataLoaderService:
    """Seeds users, their videos and tweets from a JSON export.

    Expected layout::

        {"users": [{"id": ..., "username": ..., "full_name": ...,
                    "videos": [...], "tweets": [...]}]}

    Records whose id already exists are skipped, so a file can be loaded twice.
    """

    batch_size = 100

    def __init__(self, db: AsyncSession):
        self.db = db

    async def load_from_json_file(self, json_file_path: str) -> Dict[str, int]:
        file_path = Path(json_file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"JSON file not found: {json_file_path}")

        logger.info(f"Loading data from {json_file_path}")

        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        return await self.load(data)

    async def load(self, data: Dict[str, Any]) -> Dict[str, int]:
        users_data = data.get('users', [])
        loaded = {'users': 0, 'videos': 0, 'tweets': 0}

        if not users_data:
            logger.warning("No users found in seed data")
            return loaded

        batch: List[Any] = []
        for user_data in users_data:
            try:
                user_id = UUID(user_data['id'])
                if not await self._exists(Users, user_id):
                    batch.append(Users(
                        id=user_id,
                        username=user_data['username'],
                        full_name=user_data.get('full_name') or user_data['username'],
                        avatar=user_data.get('avatar'),
                        cover_image=user_data.get('cover_image'),
                        **self._timestamps(user_data),
                    ))
                    loaded['users'] += 1

                for video_data in user_data.get('videos', []):
                    video_id = UUID(video_data['id'])
                    if await self._exists(Video, video_id):
                        logger.debug(f"Video {video_id} already exists, skipping")
                        continue
                    batch.append(Video(
                        id=video_id,
                        owner_id=user_id,
                        video_file=video_data['video_file'],
                        thumbnail=video_data['thumbnail'],
                        title=video_data['title'],
                        description=video_data.get('description', ''),
                        duration=video_data.get('duration', 0),
                        views=video_data.get('views', 0),
                        is_published=video_data.get('is_published', True),
                        **self._timestamps(video_data),
                    ))
                    loaded['videos'] += 1

                for tweet_data in user_data.get('tweets', []):
                    tweet_id = UUID(tweet_data['id'])
                    if await self._exists(Tweet, tweet_id):
                        continue
                    batch.append(Tweet(
                        id=tweet_id,
                        owner_id=user_id,
                        content=tweet_data['content'],
                        **self._timestamps(tweet_data),
                    ))
                    loaded['tweets'] += 1

                if len(batch) >= self.batch_size:
                    await self._commit_batch(batch)
                    batch = []
                    logger.info(f"Loaded batch: {loaded}")

            except (KeyError, ValueError) as e:
                logger.error(f"Error processing user {user_data.get('id', 'unknown')}: {e}")
                continue

        if batch:
            await self._commit_batch(batch)

        logger.info(f"Data loading completed: {loaded}")
        return loaded

    async def _exists(self, model: Type[Any], record_id: UUID) -> bool:
        result = await self.db.execute(select(model.id).where(model.id == record_id))
        return result.first() is not None

    async def _commit_batch(self, batch: List[Any]) -> None:
        try:
            self.db.add_all(batch)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error committing batch: {e}")
            raise

    def _timestamps(self, record: Dict[str, Any]) -> Dict[str, datetime]:
        stamps = {}
        for key in ('created_at', 'updated_at'):
            if record.get(key):
                stamps[key] = self._parse_datetime(record[key])
        return stamps

    def _parse_datetime(self, date_string: str) -> datetime:
        if isinstance(date_string, datetime):
            return date_string
        return date_parser.parse(date_string)
