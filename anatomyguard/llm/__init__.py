"""LLM integration: providers and the report-synthesis pipeline."""

__all__ = [
    "ModelConfig",
    "ProviderType",
    "create_chat_model",
]

from .provider import create_chat_model, ModelConfig, ProviderType
