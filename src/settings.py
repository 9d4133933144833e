"""Static configuration for minutes2gh.

User-editable settings (logging, chat bindings, pacing) live in a single JSON
file for quick edits without touching Python. Secrets come from the
environment (optionally a .env file) and never from config.json.
"""

import json
import os

from dotenv import load_dotenv

from core.config import ChannelBinding
from core.rate_limit import validate_interval
from core.source_keys import expand_source_key_variants

load_dotenv()

NAME = "minutes2gh"
VERSION = "0.9.1"
DESCRIPTION = "a bot linking GitHub issues and PRs to the minutes of the meetings where they were discussed"

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_PATH = os.getenv("M2G_CONFIG") or os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json; an absent default file means built-in defaults."""

    if not os.path.exists(CONFIG_PATH):
        if os.getenv("M2G_CONFIG"):
            raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")
        return {}

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _normalize_channels(raw_channels: list[dict]) -> dict[str, ChannelBinding]:
    """Map every equivalent chat source key to its minutes channel."""

    bindings: dict[str, ChannelBinding] = {}
    for entry in raw_channels:
        source_key = entry.get("source_key")
        channel = entry.get("channel")
        if not source_key or not channel:
            continue
        if not entry.get("enabled", True):
            continue
        binding = ChannelBinding(channel=channel, groups=entry.get("groups"))
        for key in expand_source_key_variants(source_key):
            bindings[key] = binding
    return bindings


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

HOMEPAGE = _CONFIG.get("homepage", "")

# Pacing, in seconds:
# - ENGINE_RATE_LIMIT: between two GitHub calls of one engine run
# - BOT_RATE_LIMIT: between two bot messages to the same chat
_rate_limits = _CONFIG.get("rate_limits", {})
ENGINE_RATE_LIMIT = validate_interval(_rate_limits.get("engine", 1.0))
BOT_RATE_LIMIT = validate_interval(_rate_limits.get("bot", 1.0))

# Chats the bot serves, keyed by source key (@username or chat_id:<id>).
_bot = _CONFIG.get("bot", {})
CHAT_CHANNELS = _normalize_channels(_bot.get("channels", []))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
