from functools import lru_cache

from fastapi import Depends

from insight_engine.config import Settings, settings
from insight_engine.services.analysis_service import AnalysisService
from insight_engine.services.cache import create_cache_store
from insight_engine.services.llm import LLMClient, create_llm_client
from insight_engine.services.run_logger import RunLogger
from insight_engine.services.web_fetcher import WebContentFetcher


def get_settings() -> Settings:
    return settings


@lru_cache
def _llm_client() -> LLMClient:
    return create_llm_client(settings)


@lru_cache
def _web_fetcher() -> WebContentFetcher:
    return WebContentFetcher(
        create_cache_store(settings),
        ttl=settings.fetch_cache_ttl,
        timeout=settings.fetch_timeout,
        user_agent=settings.fetch_user_agent,
    )


async def get_llm_client() -> LLMClient:
    return _llm_client()


async def get_web_fetcher() -> WebContentFetcher:
    return _web_fetcher()


async def get_run_logger(config: Settings = Depends(get_settings)) -> RunLogger:
    return RunLogger(config.logs_dir, chunk_preview_chars=config.log_chunk_preview_chars)


async def get_analysis_service(
    config: Settings = Depends(get_settings),
    llm: LLMClient = Depends(get_llm_client),
    fetcher: WebContentFetcher = Depends(get_web_fetcher),
    run_logger: RunLogger = Depends(get_run_logger),
) -> AnalysisService:
    return AnalysisService(
        llm,
        fetcher,
        run_logger,
        ticker_urls=config.ticker_urls,
        chunk_max_chars=config.chunk_max_chars,
        summary_max_justifications=config.summary_max_justifications,
    )
