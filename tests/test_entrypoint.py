"""Tests for the local server entry point."""
from insight_engine import __main__ as entrypoint


def test_main_starts_uvicorn_with_env_overrides(monkeypatch):
    calls = []
    monkeypatch.setattr(entrypoint.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setenv("INSIGHT_ENGINE_PORT", "8123")
    monkeypatch.setenv("INSIGHT_ENGINE_RELOAD", "yes")

    entrypoint.main()

    app, kwargs = calls[0]
    assert app == "insight_engine.main:app"
    assert kwargs["port"] == 8123
    assert kwargs["reload"] is True


def test_str_to_bool():
    assert entrypoint.str_to_bool(None, False) is False
    assert entrypoint.str_to_bool("off", True) is False
    assert entrypoint.str_to_bool("1", False) is True
