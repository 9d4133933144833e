"""Telegram client factory for the minutes2gh bot."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from telethon import TelegramClient


def build_client() -> TelegramClient:
    """Create the Telethon client the bot logs in with.

    Telethon needs an application id and hash even for bot accounts; the bot
    itself authenticates later with ``client.start(bot_token=...)``, so no
    phone login happens here. The session file (``SESSION_NAME``, default
    "minutes2gh") keeps the bot authorization between restarts.
    """

    load_dotenv()

    api_id = os.getenv("API_ID")
    api_hash = os.getenv("API_HASH")
    if not api_id or not api_hash:
        raise RuntimeError("API_ID and API_HASH are required to run the bot")
    try:
        app_id = int(api_id)
    except ValueError as err:
        raise RuntimeError(f"API_ID must be numeric, got {api_id!r}") from err

    session_name = os.getenv("SESSION_NAME", "minutes2gh")
    logging.getLogger(__name__).info("Creating Telegram client for session %s", session_name)
    return TelegramClient(session_name, app_id, api_hash)
