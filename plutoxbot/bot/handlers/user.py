from aiogram import Router, F, Bot
from aiogram.filters import CommandStart
from aiogram.types import CallbackQuery, InlineKeyboardButton, InlineKeyboardMarkup, Message
from aiogram.utils.chat_action import ChatActionSender
from aiogram.enums import ParseMode
from loguru import logger

from ..config import settings
from ..services.dialog_service import DialogService
from ..utils.telegram_transport import TelegramReplyTransport, turn_from_message

router = Router()

WELCOME_CAPTION = (
    "👋 *Welcome to PlutoxAI!*\n\n"
    "Your smart AI assistant.\n"
    "Tap the button below to begin:"
)
READY_TEXT = "🤖 *PlutoxAI is ready!*\nAsk me anything — text or request an image. 🚀"


def start_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="🚀 Start Conversation", callback_data="start_convo")],
        [InlineKeyboardButton(text="🌐 Join Community", url=settings.COMMUNITY_URL)],
    ])


@router.message(CommandStart())
async def cmd_start(message: Message, dialog: DialogService):
    if not message.from_user:
        return
    logger.info(f"--- /start from user {message.from_user.id} ---")
    await dialog.register_user(turn_from_message(message).sender)
    await message.answer_photo(
        photo=settings.BANNER_URL,
        caption=WELCOME_CAPTION,
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=start_keyboard(),
    )


@router.callback_query(F.data == "start_convo")
async def start_convo_callback(call: CallbackQuery):
    await call.answer()
    if call.message:
        await call.message.answer(READY_TEXT, parse_mode=ParseMode.MARKDOWN)


@router.message(F.text)
async def dialog_handler(message: Message, bot: Bot, dialog: DialogService):
    if not message.from_user or not message.text:
        return

    turn = turn_from_message(message)
    async with ChatActionSender.typing(bot=bot, chat_id=message.chat.id):
        await dialog.handle_turn(turn, TelegramReplyTransport(message))
