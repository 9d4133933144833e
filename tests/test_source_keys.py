from __future__ import annotations

from core.source_keys import expand_source_key_variants, source_key_for


def test_source_key_for() -> None:
    assert source_key_for("W3C_WoT", -100123) == "@w3c_wot"
    assert source_key_for(None, -100123) == "chat_id:-100123"


def test_usernames_are_lowercased() -> None:
    assert expand_source_key_variants("@W3C_WoT") == {"@w3c_wot"}


def test_expand_chat_id_variants_positive() -> None:
    variants = expand_source_key_variants("chat_id:123")
    assert "chat_id:123" in variants
    assert "chat_id:-123" in variants
    assert "chat_id:-1000000000123" in variants


def test_expand_chat_id_variants_negative_100() -> None:
    variants = expand_source_key_variants("chat_id:-100987654321")
    assert "chat_id:-100987654321" in variants
    assert "chat_id:987654321" in variants


def test_unparseable_keys_are_kept() -> None:
    assert expand_source_key_variants("chat_id:abc") == {"chat_id:abc"}
