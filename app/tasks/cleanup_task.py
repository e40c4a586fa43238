from typing import Any, Dict
from uuid import UUID

from arq import Retry, create_pool
from arq.connections import RedisSettings as ArqRedisSettings
from loguru import logger

from app.core.config import RedisSettings
from app.core.errors import StorageUnavailable
from app.db.database import get_async_sessionmaker
from app.services.cascade_service import CascadingDeleteCoordinator


def get_arq_redis_settings() -> ArqRedisSettings:
    redis_config = RedisSettings()
    return ArqRedisSettings(
        host=redis_config.redis_host,
        port=redis_config.redis_port,
        password=redis_config.redis_password,
    )


async def purge_video_dependents_task(
    ctx: Dict[str, Any],
    video_id: str
) -> Dict[str, int]:
    sessionmaker = ctx.get("sessionmaker") or get_async_sessionmaker()

    async with sessionmaker() as session:
        try:
            removed = await CascadingDeleteCoordinator(session).on_video_deleted(UUID(video_id))
        except StorageUnavailable:
            job_try = ctx.get("job_try", 1)
            logger.warning(f"Cleanup for video {video_id} failed on try {job_try}, retrying")
            raise Retry(defer=job_try * 5)

    logger.info(f"Retried cleanup for video {video_id}: {removed}")
    return removed


async def schedule_video_cleanup(video_id: UUID) -> bool:
    pool = None
    try:
        pool = await create_pool(get_arq_redis_settings())
        await pool.enqueue_job(
            "purge_video_dependents_task",
            str(video_id),
            _job_id=f"purge-video-{video_id}",
        )
        logger.info(f"Scheduled cleanup for video {video_id}")
        return True
    except Exception as e:
        logger.exception(f"Could not schedule cleanup for video {video_id}: {e}")
        return False
    finally:
        if pool:
            await pool.close()
