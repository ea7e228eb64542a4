from pathlib import Path

import yaml
from pydantic_settings import BaseSettings

DEFAULT_TICKER_URLS = {
    "VOLV-B": [
        "https://www.volvogroup.com/en/about-us/strategy.html",
        "https://www.volvogroup.com/en/news-and-media.html",
        "https://www.google.com/finance/quote/VOLV-B:STO",
    ],
    "HM-B": [
        "https://hmgroup.com/media/news/",
        "https://www.google.com/finance/quote/HM-B:STO",
    ],
}


class Settings(BaseSettings):
    # LLM providers (OpenAI-compatible endpoints)
    openai_api_key: str = "default"
    openai_base_url: str = "https://api.openai.com/v1"
    llm_model: str = "gpt-4o-mini"
    llm_temperature: float = 0.3
    llm_timeout: float = 30.0

    openrouter_api_key: str | None = None
    openrouter_model: str | None = None
    groq_api_key: str | None = None
    groq_model: str | None = None

    # Web content fetching
    redis_url: str | None = None
    fetch_cache_ttl: int = 3600  # seconds
    fetch_timeout: float = 30.0
    fetch_user_agent: str = "insight-engine/0.1 (+https://example.com/bot)"

    # Pipeline
    logs_dir: str = "logs"
    chunk_max_chars: int = 8000
    log_chunk_preview_chars: int = 2000
    summary_max_justifications: int = 10
    max_upload_files: int = 5

    allowed_origins: list[str] = ["*"]
    ticker_urls: dict[str, list[str]] = DEFAULT_TICKER_URLS

    extra_config: dict = {}

    class Config:
        env_file = str(Path(__file__).parent.parent / ".env")  # project root
        env_file_encoding = "utf-8"


def load_settings(config_path: Path = Path("configs/config.yaml")) -> Settings:
    """
    Build settings from .env, then layer the YAML config on top.

    Values set in the environment win over YAML. YAML keys that are not
    settings fields are kept in ``extra_config``.
    """
    loaded = Settings()

    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}

        for key, value in yaml_config.items():
            if key in Settings.model_fields:
                if key not in loaded.model_fields_set:
                    setattr(loaded, key, value)
            else:
                loaded.extra_config[key] = value

    loaded.ticker_urls = {
        ticker.upper(): list(urls) for ticker, urls in loaded.ticker_urls.items()
    }
    return loaded


settings = load_settings()
