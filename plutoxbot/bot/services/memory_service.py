from loguru import logger

from ..db.repository import MEMORY_LIMIT
from ..models.message import ROLE_BOT
from ..models.result import ErrorKind, Result

# stored bot rows are sent to the chat backend as assistant turns
BACKEND_ROLES = {ROLE_BOT: "assistant"}


async def get_conversation_memory(store, user_id: int) -> list:
    """
    Last MEMORY_LIMIT messages of the user in chronological order.
    A failed read is treated as empty history.
    """
    try:
        result = await store.query_recent_messages(user_id, limit=MEMORY_LIMIT)
    except Exception as e:
        result = Result.failure(ErrorKind.STORE_UNAVAILABLE, str(e))
    if not result.ok:
        logger.warning(f"Could not load history for user {user_id}, continuing without it: {result.detail}")
        return []
    return list(reversed(result.value or []))


async def build_context(store, user_id: int, text: str, system_prompt: str) -> list:
    memory = await get_conversation_memory(store, user_id)
    messages = [{"role": "system", "content": system_prompt}]
    messages.extend(
        {"role": BACKEND_ROLES.get(m.role, m.role), "content": m.content} for m in memory
    )
    messages.append({"role": "user", "content": text})
    return messages
