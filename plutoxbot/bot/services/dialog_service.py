from typing import Protocol

from loguru import logger

from ..models.message import ROLE_BOT, ROLE_USER, MessageModel
from ..models.result import ErrorKind, Result
from ..models.turn import InboundTurn, Reply
from ..models.user import User
from .intent_service import Intent, classify_intent, is_creator_query
from .memory_service import build_context

DEFAULT_SYSTEM_PROMPT = "You are PlutoxAI, a helpful friendly assistant."
CREATOR_REPLY = (
    "🤖 I was created by *PlutoxofWeb3*.\n\n"
    "Connect with the creator:\n"
    "• X: @Plutoxofweb3\n"
    "• Telegram: @PlutoxWeb3"
)
TEXT_FALLBACK = "⚠️ AI encountered an issue. Please try again."
EMPTY_REPLY_FALLBACK = "⚠️ AI returned no response."
IMAGE_CAPTION = "🖼 Here’s your AI-generated image!"
IMAGE_FAILURE_REPLY = "⚠️ Failed to generate the image. Try again later."
IMAGE_FAILURE_MARKER = "⚠️ Failed to generate image"


class ReplyTransport(Protocol):
    async def send_text(self, text: str, parse_mode: str | None = None): ...

    async def send_image(self, locator: str, caption: str): ...


def text_or_fallback(result: Result) -> str:
    if result.ok:
        return result.value
    if result.error == ErrorKind.MALFORMED_BACKEND_RESPONSE:
        return EMPTY_REPLY_FALLBACK
    return TEXT_FALLBACK


class DialogService:
    """
    Handles one conversational turn end to end:
    register sender, log inbound text, route, generate, log the bot outcome, deliver.

    Holds no per-user state, everything is re-read from the store, so a single
    instance serves every update the dispatcher hands over.
    """

    def __init__(self, store, backend, system_prompt: str = DEFAULT_SYSTEM_PROMPT,
                 creator_reply: str = CREATOR_REPLY):
        self.store = store
        self.backend = backend
        self.system_prompt = system_prompt
        self.creator_reply = creator_reply

    async def register_user(self, user: User):
        try:
            result = await self.store.ensure_user(user)
        except Exception as e:
            result = Result.failure(ErrorKind.STORE_UNAVAILABLE, str(e))
        if not result.ok:
            logger.warning(f"User {user.id}: registration skipped ({result.detail})")

    async def log_message(self, user_id: int, role: str, content: str):
        try:
            result = await self.store.insert_message(MessageModel(user_id=user_id, role=role, content=content))
        except Exception as e:
            result = Result.failure(ErrorKind.STORE_UNAVAILABLE, str(e))
        if not result.ok:
            logger.warning(f"User {user_id}: {role} message was not persisted ({result.detail})")

    async def decide_reply(self, turn: InboundTurn) -> tuple[Reply, str]:
        """Returns the reply to deliver and the content to persist as the bot message."""
        if is_creator_query(turn.text):
            logger.info(f"User {turn.user_id}: creator question, canned reply")
            return Reply.text(self.creator_reply, parse_mode="Markdown"), self.creator_reply

        if classify_intent(turn.text) == Intent.IMAGE_REQUEST:
            logger.info(f"User {turn.user_id}: image request")
            result = await self.backend.generate_image(turn.text)
            if result.ok:
                return Reply.image(result.value, IMAGE_CAPTION), result.value
            return Reply.text(IMAGE_FAILURE_REPLY), IMAGE_FAILURE_MARKER

        messages = await build_context(self.store, turn.user_id, turn.text, self.system_prompt)
        reply_text = text_or_fallback(await self.backend.generate_text(messages))
        return Reply.text(reply_text), reply_text

    async def deliver(self, reply: Reply, transport: ReplyTransport, user_id: int):
        try:
            if reply.kind == "image":
                await transport.send_image(reply.locator, reply.caption)
            else:
                await transport.send_text(reply.content, parse_mode=reply.parse_mode)
        except Exception as e:
            logger.error(f"User {user_id}: reply delivery failed: {e}")

    async def handle_turn(self, turn: InboundTurn, transport: ReplyTransport) -> Reply:
        await self.register_user(turn.sender)
        await self.log_message(turn.user_id, ROLE_USER, turn.text)

        try:
            reply, bot_content = await self.decide_reply(turn)
        except Exception as e:
            logger.exception(f"User {turn.user_id}: turn failed unexpectedly: {e}")
            reply, bot_content = Reply.text(TEXT_FALLBACK), TEXT_FALLBACK

        await self.log_message(turn.user_id, ROLE_BOT, bot_content)
        await self.deliver(reply, transport, turn.user_id)
        logger.info(f"User {turn.user_id} got a {reply.kind} reply")
        return reply
