from aiogram import BaseMiddleware
from aiogram.types import Message
from loguru import logger
from redis.exceptions import RedisError


class LoggingMiddleware(BaseMiddleware):
    async def __call__(self, handler, event, data):
        if isinstance(event, Message) and event.from_user is not None:
            user = event.from_user
            logger.debug(f"User {user.id} (@{user.username}): {event.text!r}")
        return await handler(event, data)


class UserTurnLockMiddleware(BaseMiddleware):
    """
    Serialises turns of the same user through a Redis lock so that their
    user/bot message rows do not interleave. Falls back to running unlocked
    if Redis is unreachable.
    """

    def __init__(self, redis, timeout: float = 120.0, blocking_timeout: float = 90.0):
        self.redis = redis
        self.timeout = timeout
        self.blocking_timeout = blocking_timeout

    async def __call__(self, handler, event, data):
        if not isinstance(event, Message) or event.from_user is None or not event.text:
            return await handler(event, data)

        user_id = event.from_user.id
        lock = self.redis.lock(
            f"turn-lock:{user_id}", timeout=self.timeout, blocking_timeout=self.blocking_timeout
        )
        try:
            acquired = await lock.acquire()
        except RedisError as e:
            logger.warning(f"[TurnLock] Redis unavailable for user {user_id}, running unlocked: {e}")
            return await handler(event, data)

        if not acquired:
            logger.warning(f"[TurnLock] Timed out waiting for user {user_id}, running unlocked")
            return await handler(event, data)

        try:
            return await handler(event, data)
        finally:
            try:
                await lock.release()
            except RedisError as e:
                logger.warning(f"[TurnLock] Could not release lock for user {user_id}: {e}")


def setup_middlewares(dp, redis=None, serialize_user_turns: bool = False):
    dp.message.middleware(LoggingMiddleware())
    if serialize_user_turns:
        if redis is None:
            logger.warning("SERIALIZE_USER_TURNS is set but REDIS_DSN is empty, turns stay unserialised")
        else:
            dp.message.middleware(UserTurnLockMiddleware(redis))
