import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI, OpenAIError

from insight_engine.config import Settings, settings
from insight_engine.exceptions import ModelError

logger = logging.getLogger(__name__)


class Provider(Enum):
    OPENAI = "openai"
    OPENROUTER = "openrouter"
    GROQ = "groq"


@dataclass
class ProviderConfig:
    name: Provider
    base_url: str
    api_key: str
    model: str


def providers_from_settings(config: Settings) -> List[ProviderConfig]:
    """Build the provider list in failover order from settings."""
    providers = []

    if config.openai_api_key:
        providers.append(
            ProviderConfig(
                name=Provider.OPENAI,
                base_url=config.openai_base_url,
                api_key=config.openai_api_key,
                model=config.llm_model,
            )
        )

    # OpenRouter - OpenAI-compatible gateway
    if config.openrouter_api_key:
        providers.append(
            ProviderConfig(
                name=Provider.OPENROUTER,
                base_url="https://openrouter.ai/api/v1",
                api_key=config.openrouter_api_key,
                model=config.openrouter_model or "openai/gpt-4o-mini",
            )
        )

    # Groq - OpenAI-compatible endpoint
    if config.groq_api_key:
        providers.append(
            ProviderConfig(
                name=Provider.GROQ,
                base_url="https://api.groq.com/openai/v1",
                api_key=config.groq_api_key,
                model=config.groq_model or "llama-3.1-8b-instant",
            )
        )

    if not providers:
        raise ValueError("No LLM providers configured. Please add API keys to settings.")

    logger.info(f"Initialized {len(providers)} providers: {[p.name.value for p in providers]}")
    return providers


class LLMClient:
    """
    Chat-completion client over one or more OpenAI-compatible providers.

    A call goes to the current provider; on failure the next configured
    provider is tried once. When every provider fails a ModelError is raised.
    """

    def __init__(
        self,
        providers: List[ProviderConfig],
        temperature: float = 0.3,
        timeout: float = 30.0,
    ):
        if not providers:
            raise ValueError("At least one provider is required")
        self.providers = providers
        self.temperature = temperature
        self.timeout = timeout
        self.current_provider_idx = 0
        self._clients: Dict[Provider, AsyncOpenAI] = {}

    def _get_client(self, config: ProviderConfig) -> AsyncOpenAI:
        """Get or create OpenAI client for provider."""
        if config.name not in self._clients:
            self._clients[config.name] = AsyncOpenAI(
                base_url=config.base_url,
                api_key=config.api_key,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._clients[config.name]

    async def create_completion(self, **kwargs) -> Any:
        """
        Create a chat completion, rotating through providers on failure.

        Args:
            **kwargs: Arguments to pass to the OpenAI chat completion API

        Returns:
            Chat completion response

        Raises:
            ModelError: If all providers fail
        """
        last_error: Optional[Exception] = None

        for attempt in range(len(self.providers)):
            config = self.providers[self.current_provider_idx]
            request = dict(kwargs)
            request.setdefault("model", config.model)

            try:
                return await self._get_client(config).chat.completions.create(**request)
            except OpenAIError as e:
                last_error = e
                logger.warning(
                    f"Provider {config.name.value} failed (attempt {attempt + 1}/{len(self.providers)}): {e}"
                )
                self.current_provider_idx = (self.current_provider_idx + 1) % len(self.providers)
                if attempt < len(self.providers) - 1:
                    await asyncio.sleep(0.5)

        raise ModelError(
            f"All {len(self.providers)} providers failed. Last error: {last_error}"
        )

    async def complete(
        self,
        prompt: str,
        *,
        temperature: Optional[float] = None,
        model: Optional[str] = None,
    ) -> str:
        """
        Send a single user prompt and return the reply text.

        Example:
            text = await llm_client.complete("Respond ONLY in JSON: ...")
        """
        kwargs: Dict[str, Any] = {
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature if temperature is None else temperature,
        }
        if model:
            kwargs["model"] = model

        response = await self.create_completion(**kwargs)
        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError) as e:
            raise ModelError(f"Malformed completion response: {e}") from e
        return content or ""

    def get_available_providers(self) -> List[str]:
        """Get list of configured provider names."""
        return [p.name.value for p in self.providers]


def create_llm_client(config: Settings = settings) -> LLMClient:
    """Factory function to create the LLM client from settings."""
    return LLMClient(
        providers_from_settings(config),
        temperature=config.llm_temperature,
        timeout=config.llm_timeout,
    )
