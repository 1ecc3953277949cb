"""LLM provider abstraction."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from langchain_core.language_models import BaseChatModel
from pydantic import Secret, SecretStr


class ProviderType(enum.Enum):
    """Supported generation providers."""

    OpenAI = "openai"
    Anthropic = "anthropic"
    Google = "google"


@dataclass(frozen=True)
class ModelConfig:
    """Configuration for a specific model."""

    provider: ProviderType
    model_name: str
    temperature: float = 0.2
    max_tokens: int = 16384
    timeout: float = 120.0
    max_retries: int = 0


def create_chat_model(config: ModelConfig, *, api_key: Secret[str] | None) -> BaseChatModel:
    """Create a LangChain chat model from configuration.

    Gemini is not served through LangChain; see :class:`GeminiGateway`.

    Args:
        config: Model configuration
        api_key: API key for the configured provider

    Returns:
        Configured LangChain chat model
    """
    if api_key is None:
        raise ValueError(f"API key required for {config.provider.value} provider")

    if config.provider == ProviderType.OpenAI:
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=config.model_name,
            temperature=config.temperature,
            max_completion_tokens=config.max_tokens,
            timeout=config.timeout,
            max_retries=config.max_retries,
            api_key=SecretStr(api_key.get_secret_value()),
        )
    elif config.provider == ProviderType.Anthropic:
        from langchain_anthropic import ChatAnthropic

        return ChatAnthropic(
            model_name=config.model_name,
            temperature=config.temperature,
            max_tokens_to_sample=config.max_tokens,
            timeout=config.timeout,
            max_retries=config.max_retries,
            api_key=SecretStr(api_key.get_secret_value()),
            stop=None,
        )
    else:
        raise ValueError(f"Unsupported chat model provider: {config.provider}")
