from __future__ import annotations

import asyncio

from adapters.telegram_mapper import build_chat_message


class DummyChat:
    def __init__(self, username: "str | None" = None) -> None:
        self.username = username


class DummySender:
    def __init__(self, username: "str | None" = None, first_name: "str | None" = None) -> None:
        self.username = username
        self.first_name = first_name
        self.last_name = None


class DummyMessage:
    def __init__(
        self,
        *,
        chat_id: int,
        message_id: int,
        text: "str | None",
        chat: "DummyChat | None" = None,
        sender: "DummySender | None" = None,
        is_private: bool = False,
    ) -> None:
        self.chat_id = chat_id
        self.id = message_id
        self.raw_text = text
        self.chat = chat
        self.is_private = is_private
        self._sender = sender

    async def get_sender(self):
        return self._sender


def test_public_chat_uses_username_key() -> None:
    message = DummyMessage(
        chat_id=-100123,
        message_id=10,
        text="m2g, link issues",
        chat=DummyChat("W3C_WoT"),
        sender=DummySender(username="alice"),
    )

    context = asyncio.run(build_chat_message(message))

    assert context.source_key == "@w3c_wot"
    assert context.chat_id == -100123
    assert context.message_id == 10
    assert context.sender_name == "alice"
    assert context.text == "m2g, link issues"
    assert context.is_private is False


def test_private_group_falls_back_to_chat_id() -> None:
    message = DummyMessage(
        chat_id=-100456,
        message_id=3,
        text=None,
        chat=DummyChat(None),
        sender=DummySender(first_name="Bob"),
    )

    context = asyncio.run(build_chat_message(message))

    assert context.source_key == "chat_id:-100456"
    assert context.sender_name == "Bob"
    assert context.text == ""


def test_unknown_sender() -> None:
    message = DummyMessage(chat_id=1, message_id=1, text="help", is_private=True)

    context = asyncio.run(build_chat_message(message))

    assert context.sender_name == "people"
    assert context.is_private is True
