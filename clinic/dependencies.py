from datetime import timedelta

from fastapi import Depends

from .config import settings
from .database import sessionLocal
from .stats_aggregator import StatsAggregator
from .stats_cache import StatsCache
from .stores.base import Collections
from .stores.memory import create_memory_collections
from .stores.sql import create_sql_collections

stats_cache = StatsCache(ttl=timedelta(seconds=settings.STATS_CACHE_TTL_SECONDS))

memory_collections = create_memory_collections()


def get_stats_cache() -> StatsCache:
    return stats_cache


def get_collections():
    if settings.STORE_BACKEND == "database":
        db = sessionLocal()
        try:
            yield create_sql_collections(db)
        finally:
            db.close()
    else:
        yield memory_collections


def get_stats_aggregator(
    collections: Collections = Depends(get_collections),
    cache: StatsCache = Depends(get_stats_cache),
) -> StatsAggregator:
    return StatsAggregator(collections, cache)
