from __future__ import annotations

import pytest

import client


def test_missing_credentials_fail_fast(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(client, "load_dotenv", lambda: None)
    monkeypatch.delenv("API_ID", raising=False)
    monkeypatch.setenv("API_HASH", "hash")
    with pytest.raises(RuntimeError, match="API_ID and API_HASH"):
        client.build_client()


def test_non_numeric_api_id_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(client, "load_dotenv", lambda: None)
    monkeypatch.setenv("API_ID", "not-a-number")
    monkeypatch.setenv("API_HASH", "hash")
    with pytest.raises(RuntimeError, match="must be numeric"):
        client.build_client()
