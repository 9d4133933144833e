"""Telegram chat front end.

The bot listens for messages addressed to it ("<name>, link issues"),
runs the linking engine for the chat's minutes and narrates every outcome
back into the chat, one message at a time.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Awaitable, Callable, Optional

from telethon import events

from adapters.narration import narrate_outcomes
from adapters.telegram_mapper import build_chat_message
from core.commands import Bye, Debug, Help, LinkIssues, Unrecognized, addressed_to, parse_command
from core.config import ChannelBinding, EngineArgs
from core.engine import LinkingEngine
from core.models import ChatMessage
from core.rate_limit import KeyedRateLimiter

LOGGER = logging.getLogger(__name__)

EngineFactory = Callable[[str, EngineArgs], Awaitable[LinkingEngine]]


class UnknownChannel(Exception):
    """The chat is neither configured nor public, so its minutes are unknown."""


class ChatBot:
    """Dispatches chat commands to the engine and narrates the results."""

    def __init__(
        self,
        client,
        token: str,
        engine_factory: EngineFactory,
        channels: dict[str, ChannelBinding],
        engine_rate_limit: float = 1.0,
        governor: Optional[KeyedRateLimiter] = None,
        today: Callable[[], date] = date.today,
        about: Optional[list[str]] = None,
    ) -> None:
        self._client = client
        self._token = token
        self._engine_factory = engine_factory
        self._channels = channels
        self._engine_rate_limit = engine_rate_limit
        self._governor = governor or KeyedRateLimiter(1.0)
        self._today = today
        self._about = about or []
        self._nickname: Optional[str] = None
        self._me_id: Optional[int] = None

    async def identify(self) -> None:
        """Learn the bot's own name, used to recognize addressed messages."""

        me = await self._client.get_me()
        self._nickname = getattr(me, "username", None) or getattr(me, "first_name", None)
        self._me_id = getattr(me, "id", None)
        LOGGER.info("Identified as %s", self._nickname)

    def register(self) -> None:
        """Attach the Telethon event handlers."""

        self._client.add_event_handler(self._on_message, events.NewMessage(incoming=True))
        self._client.add_event_handler(self._on_chat_action, events.ChatAction())

    async def _on_message(self, event) -> None:
        try:
            message = await build_chat_message(event.message)
        except Exception:
            LOGGER.exception("Could not map incoming message")
            return
        await self.handle(message)

    async def _on_chat_action(self, event) -> None:
        if self._me_id is None or getattr(event, "user_id", None) != self._me_id:
            return
        if event.user_added or event.user_joined:
            LOGGER.info("Joined chat %s", event.chat_id)
        elif event.user_kicked or event.user_left:
            LOGGER.info("Left chat %s", event.chat_id)

    def command_text(self, message: ChatMessage) -> Optional[str]:
        """Return the command in ``message`` if it is meant for the bot."""

        command = addressed_to(message.text, self._nickname or "")
        if command is None and message.is_private:
            # No need to name the bot in a one-to-one conversation.
            command = message.text.strip() or None
        return command

    async def handle(self, message: ChatMessage) -> None:
        """Process one chat message; failures are narrated, never raised."""

        command_text = self.command_text(message)
        if command_text is None:
            return
        command = parse_command(command_text)
        LOGGER.debug("on %s got %r, parsed from %r", message.source_key, command, command_text)
        try:
            if isinstance(command, LinkIssues):
                await self._link_issues(message, command)
            elif isinstance(command, Debug):
                await self._debug(message, command)
            elif isinstance(command, Help):
                await self._help(message)
            elif isinstance(command, Bye):
                await self._bye(message)
            elif isinstance(command, Unrecognized):
                await self.respond(message, f"sorry {message.sender_name}, I don't understand {command.text!r}")
            else:
                raise TypeError(f"Unsupported command: {command!r}")
        except Exception as err:
            LOGGER.exception("Error while handling %r on %s", command_text, message.source_key)
            await self.respond(message, f"Something wrong happened: {err}")

    async def respond(self, message: ChatMessage, text: str) -> None:
        await self._governor.acquire(message.chat_id)
        await self._client.send_message(message.chat_id, text, parse_mode=None, link_preview=False)

    def _binding_for(self, message: ChatMessage) -> ChannelBinding:
        binding = self._channels.get(message.source_key)
        if binding is not None:
            return binding
        if message.source_key.startswith("@"):
            return ChannelBinding(channel=message.source_key[1:])
        raise UnknownChannel(f"no minutes channel is configured for {message.source_key}")

    async def _link_issues(self, message: ChatMessage, command: LinkIssues) -> None:
        binding = self._binding_for(message)
        LOGGER.info("Linking issues on %s", message.source_key)
        args = EngineArgs(
            channel=binding.channel,
            date=self._today(),
            transcript=command.transcript,
            groups=command.groups or binding.groups,
            rate_limit=self._engine_rate_limit,
            dry_run=False,
        )
        await self._run_engine(message, args)

    async def _debug(self, message: ChatMessage, command: Debug) -> None:
        binding = self._binding_for(message)
        LOGGER.info(
            "Debug on %s at %s for %s",
            message.source_key,
            command.date or "current date",
            command.groups or "default group",
        )
        day = date.fromisoformat(command.date) if command.date else self._today()
        args = EngineArgs(
            channel=binding.channel,
            date=day,
            transcript=True,
            groups=command.groups or binding.groups,
            rate_limit=self._engine_rate_limit,
            dry_run=True,
        )
        await self._run_engine(message, args)

    async def _run_engine(self, message: ChatMessage, args: EngineArgs) -> None:
        engine = await self._engine_factory(self._token, args)
        async with engine:

            async def respond(text: str) -> None:
                await self.respond(message, text)

            await narrate_outcomes(engine.run(), respond)

    async def _help(self, message: ChatMessage) -> None:
        lines = list(self._about)
        if lines:
            lines[0] = f"{message.sender_name}, {lines[0]}"
        for line in lines:
            await self.respond(message, line)

    async def _bye(self, message: ChatMessage) -> None:
        await self._governor.acquire(message.chat_id)
        if message.is_private:
            return
        LOGGER.info("Leaving %s on request", message.source_key)
        await self._client.delete_dialog(message.chat_id)
