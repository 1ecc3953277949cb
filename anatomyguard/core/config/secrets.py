from __future__ import annotations

import pydantic as p
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from anatomyguard.model import BaseModel, DeploymentEnvironment

from .base import BaseSecrets
from .source import YAMLSecretsSource


class ProviderSecrets(BaseSecrets):
    """API credentials for one generation provider."""

    api_key: p.Secret[str]


class LLMSecrets(BaseSecrets):
    """LLM vendor API secrets."""

    openai: ProviderSecrets | None = None
    anthropic: ProviderSecrets | None = None
    google: ProviderSecrets | None = None


class Secrets(BaseSecrets, BaseModel):  # pyright: ignore [reportIncompatibleVariableOverride]
    model_config = SettingsConfigDict(env_prefix="ANATOMYGUARD_", env_nested_delimiter="__")

    root: p.AnyUrl
    env: DeploymentEnvironment

    llm: LLMSecrets = p.Field(default_factory=LLMSecrets)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # e.g. ANATOMYGUARD_LLM__GOOGLE__API_KEY takes precedence over secrets.yaml
        return init_settings, env_settings, YAMLSecretsSource(settings_cls)
