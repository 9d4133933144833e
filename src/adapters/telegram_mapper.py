"""Telegram-to-core message mapping adapter.

This keeps Telethon-specific details out of the bot logic.
"""

from __future__ import annotations

from telethon.tl.custom import Message

from core.models import ChatMessage
from core.source_keys import source_key_for


def source_key_from_message(message: Message) -> str:
    chat = getattr(message, "chat", None)
    username = getattr(chat, "username", None)
    if not isinstance(username, str):
        username = None
    return source_key_for(username, message.chat_id)


def _sender_name(sender) -> str:
    if sender is None:
        return "people"
    username = getattr(sender, "username", None)
    if username:
        return str(username)
    first = getattr(sender, "first_name", None)
    last = getattr(sender, "last_name", None)
    if first or last:
        return " ".join(part for part in [first, last] if part)
    title = getattr(sender, "title", None)
    return str(title) if title else "people"


async def build_chat_message(message: Message) -> ChatMessage:
    """Build a core ChatMessage from a Telethon Message."""

    sender = await message.get_sender()
    return ChatMessage(
        source_key=source_key_from_message(message),
        chat_id=message.chat_id,
        message_id=message.id,
        sender_name=_sender_name(sender),
        text=message.raw_text or "",
        is_private=bool(getattr(message, "is_private", False)),
    )
