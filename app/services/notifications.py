import json
from functools import lru_cache
from uuid import UUID

from redis.asyncio import Redis
from redis.exceptions import RedisError
from structlog import get_logger

from app.config import settings
from app.utils.retry import retry_api

logger = get_logger(__name__)


@lru_cache()
def get_redis() -> Redis:
    """Lazily create the Redis client so importing this module never connects."""
    return Redis.from_url(settings.REDIS_URL, decode_responses=True)


def channel_for(user_id: UUID | str) -> str:
    """Per-user room the realtime gateway relays to connected sockets."""
    return f"{settings.NOTIFICATION_CHANNEL_PREFIX}{user_id}"


@retry_api(tries=3, delay=0.2, backoff=2, exceptions=(RedisError, OSError))
async def _publish(channel: str, message: str) -> int:
    return await get_redis().publish(channel, message)


async def publish_status_change(user_id: UUID | str, event: str, payload: dict) -> None:
    """
    Fire-and-forget notification of an application status change.

    Runs as a background task after the response is sent; failures are
    logged and never reach the caller.
    """
    if not settings.REDIS_URL:
        logger.debug("Notifications disabled", event_type=event)
        return
    message = json.dumps({"event": event, "userId": str(user_id), **payload}, default=str)
    try:
        receivers = await _publish(channel_for(user_id), message)
    except (RedisError, OSError) as e:
        logger.warning("Notification publish failed", event_type=event, user_id=str(user_id), error=str(e))
        return
    logger.debug("Notification published", event_type=event, user_id=str(user_id), receivers=receivers)
