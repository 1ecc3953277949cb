"""LLM configuration settings."""

from __future__ import annotations

import typing as t

import annotated_types as ant

from anatomyguard.llm.provider import ModelConfig, ProviderType
from anatomyguard.model import MediaType

from .base import BaseSettings


class EvaluationSettings(BaseSettings):
    """Limits applied to each evaluation."""

    allowed_media_types: tuple[str, ...] = tuple(m.value for m in MediaType)
    max_document_bytes: t.Annotated[int, ant.Gt(0)] = 20 * 1024 * 1024
    generation_timeout_seconds: t.Annotated[float, ant.Gt(0)] = 120.0


class LLMSettings(BaseSettings):
    """Generation provider and model configuration."""

    provider: ProviderType = ProviderType.Google
    model: str = "gemini-2.5-pro"
    max_tokens: int = 16384
    temperature: float = 0.2
    timeout_seconds: float = 120.0
    max_retries: t.Annotated[int, ant.Ge(0)] = 0
    # gemini only
    thinking_budget: int | None = None
    evaluation: EvaluationSettings = EvaluationSettings()

    def chat_model_config(self) -> ModelConfig:
        return ModelConfig(
            provider=self.provider,
            model_name=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            timeout=self.timeout_seconds,
            max_retries=self.max_retries,
        )
