"""Tests for settings loading."""
from insight_engine.config import DEFAULT_TICKER_URLS, load_settings


def test_yaml_overrides_defaults_and_keeps_extras(tmp_path, monkeypatch):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "ticker_urls:\n"
        "  acme:\n"
        "    - https://acme.example.com/\n"
        "chunk_max_chars: 4000\n"
        "feature_flag: true\n"
    )
    monkeypatch.delenv("CHUNK_MAX_CHARS", raising=False)

    loaded = load_settings(config_file)

    assert loaded.ticker_urls == {"ACME": ["https://acme.example.com/"]}
    assert loaded.chunk_max_chars == 4000
    assert loaded.extra_config["feature_flag"] is True


def test_environment_wins_over_yaml(tmp_path, monkeypatch):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("chunk_max_chars: 4000\n")
    monkeypatch.setenv("CHUNK_MAX_CHARS", "1234")

    assert load_settings(config_file).chunk_max_chars == 1234


def test_missing_yaml_uses_defaults(tmp_path):
    loaded = load_settings(tmp_path / "absent.yaml")

    assert set(loaded.ticker_urls) == set(DEFAULT_TICKER_URLS)
    assert loaded.llm_temperature == 0.3
