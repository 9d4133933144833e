from __future__ import annotations

import asyncio
from datetime import date
from typing import Optional

from adapters.narration import NOTHING_TO_DO
from adapters.telegram_bot import ChatBot
from core.config import ChannelBinding, EngineArgs
from core.errors import MinutesNotFound
from core.models import ChatMessage, Created, Duplicate, Outcome
from core.rate_limit import KeyedRateLimiter

from fakes import FakeClock

ISSUE = "https://github.com/acme/widgets/issues/5"


class DummyMe:
    id = 42
    username = "m2g"
    first_name = "Minutes"


class FakeClient:
    def __init__(self) -> None:
        self.sent: list[tuple[int, str]] = []
        self.left: list[int] = []

    async def get_me(self) -> DummyMe:
        return DummyMe()

    async def send_message(self, chat_id: int, text: str, **kwargs) -> None:
        self.sent.append((chat_id, text))

    async def delete_dialog(self, chat_id: int) -> None:
        self.left.append(chat_id)


class FakeEngine:
    def __init__(self, outcomes: list[Outcome]) -> None:
        self._outcomes = outcomes
        self.closed = False

    async def run(self):
        for outcome in self._outcomes:
            yield outcome

    async def __aenter__(self) -> "FakeEngine":
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.closed = True


class FakeEngineFactory:
    def __init__(self, outcomes: Optional[list[Outcome]] = None, error: Optional[Exception] = None) -> None:
        self.outcomes = outcomes or []
        self.error = error
        self.calls: list[tuple[str, EngineArgs]] = []
        self.engines: list[FakeEngine] = []

    async def __call__(self, token: str, args: EngineArgs) -> FakeEngine:
        self.calls.append((token, args))
        if self.error is not None:
            raise self.error
        engine = FakeEngine(self.outcomes)
        self.engines.append(engine)
        return engine


def _message(
    text: str,
    *,
    source_key: str = "@w3c_wot",
    chat_id: int = -100123,
    is_private: bool = False,
) -> ChatMessage:
    return ChatMessage(
        source_key=source_key,
        chat_id=chat_id,
        message_id=1,
        sender_name="alice",
        text=text,
        is_private=is_private,
    )


def _bot(client: FakeClient, factory: FakeEngineFactory, channels=None) -> ChatBot:
    clock = FakeClock()
    return ChatBot(
        client,
        token="gh-token",
        engine_factory=factory,
        channels=channels if channels is not None else {},
        governor=KeyedRateLimiter(1.0, clock=clock, sleep=clock.sleep),
        today=lambda: date(2024, 11, 14),
        about=["I am a test bot.", "... version 1."],
    )


def _run(bot: ChatBot, *messages: ChatMessage) -> None:
    async def scenario() -> None:
        await bot.identify()
        for message in messages:
            await bot.handle(message)

    asyncio.run(scenario())


def test_link_issues_narrates_each_outcome() -> None:
    client = FakeClient()
    factory = FakeEngineFactory(
        outcomes=[
            Outcome(kind=Created("https://github.com/c/1"), issue=ISSUE),
            Outcome(kind=Duplicate("https://github.com/c/2"), issue=ISSUE),
        ]
    )
    bot = _bot(client, factory)

    _run(bot, _message("m2g, link issues with transcript"))

    assert client.sent == [
        (-100123, "comment created: https://github.com/c/1"),
        (-100123, "comment already there: https://github.com/c/2"),
    ]
    token, args = factory.calls[0]
    assert token == "gh-token"
    assert args.channel == "w3c_wot"
    assert args.date == date(2024, 11, 14)
    assert args.transcript is True
    assert args.dry_run is False
    assert factory.engines[0].closed


def test_nothing_to_do_when_no_outcome() -> None:
    client = FakeClient()
    bot = _bot(client, FakeEngineFactory())

    _run(bot, _message("m2g, link issues"))

    assert client.sent == [(-100123, NOTHING_TO_DO)]


def test_configured_channel_and_groups_are_used() -> None:
    client = FakeClient()
    factory = FakeEngineFactory()
    channels = {"chat_id:-100555": ChannelBinding(channel="wot", groups="wg/wot,ig/wot")}
    bot = _bot(client, factory, channels)

    _run(bot, _message("m2g, link issues", source_key="chat_id:-100555", chat_id=-100555))

    args = factory.calls[0][1]
    assert args.channel == "wot"
    assert args.groups == "wg/wot,ig/wot"


def test_unknown_private_group_is_reported() -> None:
    client = FakeClient()
    factory = FakeEngineFactory()
    bot = _bot(client, factory)

    _run(bot, _message("m2g, link issues", source_key="chat_id:-100555", chat_id=-100555))

    assert factory.calls == []
    assert client.sent[0][1].startswith("Something wrong happened: no minutes channel")


def test_debug_is_a_dry_run_for_the_given_date() -> None:
    client = FakeClient()
    factory = FakeEngineFactory()
    bot = _bot(client, factory)

    _run(bot, _message("@m2g debug date 2024-10-01 groups cg/credentials"))

    args = factory.calls[0][1]
    assert args.dry_run is True
    assert args.transcript is True
    assert args.date == date(2024, 10, 1)
    assert args.groups == "cg/credentials"


def test_load_failure_is_narrated() -> None:
    client = FakeClient()
    bot = _bot(client, FakeEngineFactory(error=MinutesNotFound("https://www.w3.org/x-minutes.html")))

    _run(bot, _message("m2g, link issues"))

    assert client.sent == [(-100123, "Something wrong happened: Minutes not found <https://www.w3.org/x-minutes.html>")]


def test_messages_for_others_are_ignored() -> None:
    client = FakeClient()
    factory = FakeEngineFactory()
    bot = _bot(client, factory)

    _run(bot, _message("link issues"), _message("bob, link issues"))

    assert client.sent == []
    assert factory.calls == []


def test_private_chat_needs_no_name() -> None:
    client = FakeClient()
    bot = _bot(client, FakeEngineFactory())

    _run(bot, _message("help", source_key="@alice", chat_id=7, is_private=True))

    assert client.sent == [(7, "alice, I am a test bot."), (7, "... version 1.")]


def test_unrecognized_command() -> None:
    client = FakeClient()
    bot = _bot(client, FakeEngineFactory())

    _run(bot, _message("m2g, make coffee"))

    assert client.sent == [(-100123, "sorry alice, I don't understand 'make coffee'")]


def test_bye_leaves_group() -> None:
    client = FakeClient()
    bot = _bot(client, FakeEngineFactory())

    _run(bot, _message("m2g, please leave"))

    assert client.left == [-100123]
    assert client.sent == []
