"""LLM container for dependency injection."""

from __future__ import annotations

import typing as t

import jinja2
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Dependency, Factory, Provider, Singleton

from anatomyguard.core.config import LLMSecrets, LLMSettings
from anatomyguard.llm import create_chat_model, ProviderType
from anatomyguard.llm.evaluation import ChatModelGateway, DocumentEncoder, EvaluationPipeline, GeminiGateway, \
    GenerationGateway, ReportAssembler, ReportRequestBuilder, ResponseValidator, ScoreAuditEngine


def create_gateway(settings: LLMSettings, secrets: LLMSecrets) -> GenerationGateway:
    """Create the generation gateway for the configured provider.

    Credentials are passed in explicitly; nothing here reads the process
    environment.
    """
    provider_secrets = getattr(secrets, settings.provider.value)
    if provider_secrets is None:
        raise ValueError(f"API key required for {settings.provider.value} provider")

    if settings.provider == ProviderType.Google:
        return GeminiGateway(
            provider_secrets.api_key,
            settings.model,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            thinking_budget=settings.thinking_budget,
            timeout=settings.timeout_seconds,
        )
    return ChatModelGateway(create_chat_model(settings.chat_model_config(), api_key=provider_secrets.api_key))


def provide_llm_secrets(secrets: dict[str, t.Any] | None) -> LLMSecrets:
    return LLMSecrets(secrets or {})


class LLMContainer(DeclarativeContainer):
    """Container for the evaluation pipeline and its collaborators."""

    config: Configuration = Configuration()
    secrets: Configuration = Configuration()
    prompts: Dependency[jinja2.Environment] = Dependency(instance_of=jinja2.Environment)

    settings: Provider[LLMSettings] = Singleton(LLMSettings, config)
    llm_secrets: Provider[LLMSecrets] = Singleton(provide_llm_secrets, secrets)

    gateway: Provider[GenerationGateway] = Singleton(create_gateway, settings=settings, secrets=llm_secrets)
    encoder: Provider[DocumentEncoder] = Singleton(
        DocumentEncoder,
        allowed_media_types=config.evaluation.allowed_media_types,
        max_bytes=config.evaluation.max_document_bytes,
    )
    request_builder: Provider[ReportRequestBuilder] = Singleton(ReportRequestBuilder, env=prompts)
    validator: Provider[ResponseValidator] = Singleton(ResponseValidator)
    audit: Provider[ScoreAuditEngine] = Singleton(ScoreAuditEngine)
    assembler: Provider[ReportAssembler] = Singleton(ReportAssembler, audit=audit)

    pipeline: Provider[EvaluationPipeline] = Factory(
        EvaluationPipeline,
        gateway=gateway,
        builder=request_builder,
        encoder=encoder,
        validator=validator,
        assembler=assembler,
        timeout=config.evaluation.generation_timeout_seconds,
    )
