import asyncpg
from loguru import logger

from ..models.message import MessageModel
from ..models.result import ErrorKind, Result
from ..models.user import User

MEMORY_LIMIT = 5

# asyncpg raises InterfaceError on pool misuse and OSError on network failure
STORE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


class MessageStore:
    """
    Append-only access to the users/messages tables.
    Every method returns a Result; store failures never raise to the caller.
    """

    def __init__(self, db):
        self.db = db

    async def find_user(self, user_id: int) -> Result:
        try:
            row = await self.db.fetchrow(
                "SELECT id, username, first_name, created_at FROM users WHERE id=$1", user_id
            )
        except STORE_ERRORS as e:
            logger.error(f"[Store] find_user({user_id}) failed: {e}")
            return Result.failure(ErrorKind.STORE_UNAVAILABLE, str(e))
        return Result.success(User(**dict(row)) if row else None)

    async def insert_user(self, user: User) -> Result:
        try:
            await self.db.execute(
                "INSERT INTO users (id, username, first_name) VALUES ($1, $2, $3) "
                "ON CONFLICT (id) DO NOTHING",
                user.id, user.username, user.first_name
            )
        except STORE_ERRORS as e:
            logger.error(f"[Store] insert_user({user.id}) failed: {e}")
            return Result.failure(ErrorKind.STORE_UNAVAILABLE, str(e))
        return Result.success(user)

    async def ensure_user(self, user: User) -> Result:
        """Inserts the user unless a row with the same id already exists. Value is True if created."""
        found = await self.find_user(user.id)
        if not found.ok:
            return found
        if found.value is not None:
            return Result.success(False)
        inserted = await self.insert_user(user)
        if not inserted.ok:
            return inserted
        logger.info(f"[Store] Registered new user {user.id} (@{user.username})")
        return Result.success(True)

    async def insert_message(self, message: MessageModel) -> Result:
        try:
            sequence = await self.db.fetchval(
                "INSERT INTO messages (user_id, role, content) VALUES ($1, $2, $3) RETURNING id",
                message.user_id, message.role, message.content
            )
        except STORE_ERRORS as e:
            logger.error(f"[Store] insert_message for user {message.user_id} failed: {e}")
            return Result.failure(ErrorKind.STORE_UNAVAILABLE, str(e))
        return Result.success(message.model_copy(update={"id": sequence}))

    async def query_recent_messages(self, user_id: int, limit: int = MEMORY_LIMIT) -> Result:
        """Most recent messages of the user, newest first."""
        try:
            rows = await self.db.fetch(
                "SELECT id, user_id, role, content, created_at FROM messages "
                "WHERE user_id=$1 ORDER BY id DESC LIMIT $2",
                user_id, limit
            )
        except STORE_ERRORS as e:
            logger.warning(f"[Store] query_recent_messages({user_id}) failed: {e}")
            return Result.failure(ErrorKind.STORE_UNAVAILABLE, str(e))
        return Result.success([MessageModel(**dict(r)) for r in rows])
