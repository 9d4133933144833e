"""Helpers for working with chat source keys.

A source key is ``@username`` for public chats and ``chat_id:<id>``
otherwise. Telegram exposes the same group under several numeric ids, so
configured keys are expanded to all equivalent forms.
"""

from __future__ import annotations

from typing import Optional


def source_key_for(username: Optional[str], chat_id: int) -> str:
    """Normalize a source key using the single rule enforced across the app."""

    if username:
        return f"@{username.lower()}"
    return f"chat_id:{chat_id}"


def _expand_chat_id_variants(raw_chat_id: int) -> set[int]:
    """Return equivalent chat id variants (peer id, chat id, channel id)."""

    variants: set[int] = {raw_chat_id}
    if raw_chat_id < 0:
        raw_text = str(raw_chat_id)
        if raw_text.startswith("-100"):
            # Channel/supergroup peer id: -100<channel_id>
            channel_part = raw_text[4:]
            if channel_part.isdigit():
                variants.add(int(channel_part))
        else:
            variants.add(abs(raw_chat_id))
        return variants

    variants.add(-raw_chat_id)
    variants.add(-1000000000000 - raw_chat_id)
    return variants


def expand_source_key_variants(source_key: str) -> set[str]:
    """Expand a configured key to every equivalent form; usernames are lowercased."""

    if source_key.startswith("@"):
        return {source_key.lower()}
    if not source_key.startswith("chat_id:"):
        return {source_key}
    try:
        raw_chat_id = int(source_key.split("chat_id:", 1)[1])
    except ValueError:
        return {source_key}
    return {f"chat_id:{variant}" for variant in _expand_chat_id_variants(raw_chat_id)}
