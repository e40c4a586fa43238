import asyncio
import sys
from pathlib import Path

from loguru import logger

sys.path.insert(0, str(Path(__file__).parent.parent))

from app.db.database import get_async_sessionmaker, get_engine, init_models
from app.services.data_loader_service import DataLoaderService

USAGE = "Usage: python scripts/load_data.py <seed.json> [<seed.json> ...]"


async def seed(paths):
    await init_models()
    sessionmaker = get_async_sessionmaker()

    totals = {"users": 0, "videos": 0, "tweets": 0}
    async with sessionmaker() as session:
        loader = DataLoaderService(session)
        for path in paths:
            loaded = await loader.load_from_json_file(path)
            for key, count in loaded.items():
                totals[key] += count
            logger.info(f"{path}: {loaded}")
    return totals


async def main():
    paths = sys.argv[1:]
    if not paths:
        logger.error(USAGE)
        sys.exit(1)

    missing = [path for path in paths if not Path(path).exists()]
    if missing:
        logger.error(f"File not found: {', '.join(missing)}")
        sys.exit(1)

    try:
        totals = await seed(paths)
    except Exception as e:
        logger.exception(f"Seeding failed: {e}")
        sys.exit(1)
    finally:
        await get_engine().dispose()

    logger.success(
        f"Seeded {totals['users']} users, {totals['videos']} videos and {totals['tweets']} tweets"
    )


if __name__ == "__main__":
    asyncio.run(main())
