import redis.asyncio as redis


def create_redis(dsn: str):
    """Returns a Redis client, or None when no DSN is configured."""
    if not dsn:
        return None
    return redis.from_url(dsn, decode_responses=True)
