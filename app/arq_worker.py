from app.core.config import RedisSettings
from app.tasks.cleanup_task import get_arq_redis_settings, purge_video_dependents_task

app_redis_config = RedisSettings()


class WorkerSettings:
    functions = [purge_video_dependents_task]

    redis_settings = get_arq_redis_settings()

    # cleanup deletes are idempotent
    retry_jobs = True
    max_tries = app_redis_config.cleanup_max_tries
