"""
App factory, config and health tests.
"""

from __future__ import annotations
from pathlib import Path

import pytest

from app import create_app
from app.config import ConfigError, load_settings


def test_missing_api_key_is_fatal(monkeypatch, tmp_path):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(ConfigError, match="OPENAI_API_KEY"):
        load_settings()
    with pytest.raises(ConfigError):
        create_app({"LOG_DIR": str(tmp_path / "logs"), "DATA_DIR": str(tmp_path / "data")})


def test_blank_api_key_is_fatal(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "")
    with pytest.raises(ConfigError):
        load_settings()


def test_defaults_and_env(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    monkeypatch.setenv("BACKFILL_ATTEMPTS", "2")
    monkeypatch.delenv("OPENAI_MODEL", raising=False)
    s = load_settings()
    assert s.OPENAI_API_KEY == "sk-env"
    assert s.OPENAI_MODEL == "gpt-3.5-turbo"
    assert s.MAX_OUTPUT_TOKENS == 1000
    assert s.BACKFILL_ATTEMPTS == 2
    assert s.BATCH_SIZE == 3


def test_override_beats_env(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    s = load_settings({"OPENAI_API_KEY": "sk-override", "BATCH_SIZE": 5})
    assert s.OPENAI_API_KEY == "sk-override"
    assert s.BATCH_SIZE == 5


def test_health_version_ready(client):
    assert client.get("/health").data == b"ok"
    assert client.get("/version").get_json()["model"] == "gpt-3.5-turbo"
    ready = client.get("/ready")
    assert ready.status_code == 200
    assert ready.get_json() == {"ready": True, "saved_responses": 0}


def test_unknown_route_is_json_404(client):
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert r.get_json() == {"message": "Not found"}


def test_logs_written_to_configured_dir(client, settings_override):
    client.get("/health")
    assert (Path(settings_override["LOG_DIR"]) / "remix.log").exists()


def test_default_generator_is_openai(settings_override):
    from connectors.openai_text import OpenAITextGenerator

    app = create_app({**settings_override, "OPENAI_MODEL": "gpt-4o-mini"})
    gen = app.container.generator
    assert isinstance(gen, OpenAITextGenerator)
    assert gen.model == "gpt-4o-mini"
    assert gen.system_prompt


@pytest.mark.parametrize("value", ["", "   ", None])
def test_blank_override_key_is_fatal(monkeypatch, value):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    with pytest.raises(ConfigError, match="OPENAI_API_KEY"):
        load_settings({"OPENAI_API_KEY": value})


def test_whitespace_env_key_is_fatal(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", " \t ")
    with pytest.raises(ConfigError):
        load_settings()


def test_key_is_trimmed(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    assert load_settings({"OPENAI_API_KEY": "  sk-pad \n"}).OPENAI_API_KEY == "sk-pad"


@pytest.mark.parametrize("raw,expected", [("20", 10), ("10", 10), ("0", 1), ("4", 4)])
def test_batch_size_is_clamped(monkeypatch, raw, expected):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    monkeypatch.setenv("BATCH_SIZE", raw)
    assert load_settings().BATCH_SIZE == expected


def test_large_batch_size_still_serves_default_batch(settings_override, fake_generator):
    app = create_app({**settings_override, "BATCH_SIZE": 20}, generator=fake_generator)
    fake_generator.replies = ["take"]
    r = app.test_client().post("/api/remix/batch", json={"text": "Hello", "style": "funny"})
    assert r.status_code == 200
    assert len(r.get_json()["variations"]) == 10
