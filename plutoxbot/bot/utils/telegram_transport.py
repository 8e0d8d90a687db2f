from aiogram.types import Message

from ..models.turn import InboundTurn
from ..models.user import User


def turn_from_message(message: Message) -> InboundTurn:
    sender = message.from_user
    return InboundTurn(
        sender=User(id=sender.id, username=sender.username, first_name=sender.first_name),
        text=message.text or "",
    )


class TelegramReplyTransport:
    """Delivers replies back into the chat the message came from."""

    def __init__(self, message: Message):
        self.message = message

    async def send_text(self, text: str, parse_mode: str | None = None):
        await self.message.answer(text, parse_mode=parse_mode)

    async def send_image(self, locator: str, caption: str):
        await self.message.answer_photo(photo=locator, caption=caption)
