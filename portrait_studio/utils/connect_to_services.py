# portrait_studio/utils/connect_to_services.py
import logging

import structlog
import tenacity
from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError

from portrait_studio.data.settings import RedisConfig

logger = structlog.get_logger(__name__)


@tenacity.retry(
    retry=tenacity.retry_if_exception_type((RedisConnectionError, ConnectionError, TimeoutError)),
    stop=tenacity.stop_after_attempt(5),
    wait=tenacity.wait_exponential(multiplier=0.5, max=8),
    before_sleep=tenacity.before_sleep_log(logging.getLogger(__name__), logging.WARNING),
    reraise=True,
)
async def wait_redis_pool(config: RedisConfig) -> Redis:
    """Connects to Redis and pings it, retrying with exponential backoff."""
    redis = Redis(
        host=config.host,
        port=config.port,
        username=config.username,
        password=config.password.get_secret_value() if config.password else None,
        db=config.db,
        decode_responses=True,
    )
    try:
        await redis.ping()
    except Exception:
        await redis.aclose()
        raise
    logger.info("Connected to Redis", host=config.host, port=config.port, db=config.db)
    return redis
