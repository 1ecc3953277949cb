"""Tests for layered configuration and secrets."""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import MagicMock

import pydantic as p
import pytest
import yaml
from pydantic_settings import SettingsError

from anatomyguard.core import AnatomyGuardContainer, Secrets, Settings
from anatomyguard.llm import ProviderType
from anatomyguard.model import DeploymentEnvironment


def settings(config_root: p.FileUrl, env: DeploymentEnvironment, *override: str) -> Settings:
    return Settings(env=env, root=config_root, override=override)


@pytest.fixture
def secrets_root(tmp_path: Path) -> p.FileUrl:
    (tmp_path / "env.d" / "test").mkdir(parents=True)
    (tmp_path / "secrets.yaml").write_text(
        yaml.safe_dump({"llm": {"google": {"api_key": "root-key"}, "openai": {"api_key": "sk-root"}}})
    )
    (tmp_path / "env.d" / "test" / "secrets.yaml").write_text(
        yaml.safe_dump({"llm": {"google": {"api_key": "test-key"}}})
    )
    return p.FileUrl(f"file://{tmp_path}")


class TestSettings(object):
    def test_environment_cascade(self, config_root: p.FileUrl) -> None:
        ps = settings(config_root, DeploymentEnvironment.Test)

        assert ps.llm.provider == ProviderType.Google
        assert ps.llm.evaluation.generation_timeout_seconds == 5
        # keys absent from env.d are kept from the root file
        assert ps.llm.evaluation.max_document_bytes == 20 * 1024 * 1024
        assert ps.logging.root.level == "WARNING"
        assert ps.logging.root.handlers == ["console"]

    def test_local_reads_root_only(self, config_root: p.FileUrl) -> None:
        ps = settings(config_root, DeploymentEnvironment.Local)

        assert ps.llm.evaluation.generation_timeout_seconds == 180
        assert ps.logging.root.level == "INFO"

    def test_overrides_take_precedence(self, config_root: p.FileUrl) -> None:
        ps = settings(
            config_root,
            DeploymentEnvironment.Test,
            "llm.temperature=0",
            "llm.evaluation.generation_timeout_seconds=30",
            "web.evaluator.backend.port = 9000",
        )

        assert ps.llm.temperature == 0
        assert ps.llm.evaluation.generation_timeout_seconds == 30
        assert ps.web.evaluator.backend.port == 9000
        assert ps.override == (
            "llm.temperature=0",
            "llm.evaluation.generation_timeout_seconds=30",
            "web.evaluator.backend.port = 9000",
        )

    def test_malformed_override(self, config_root: p.FileUrl) -> None:
        with pytest.raises(SettingsError, match="key=value"):
            settings(config_root, DeploymentEnvironment.Test, "llm.temperature")

    def test_invalid_override_value(self, config_root: p.FileUrl) -> None:
        with pytest.raises(p.ValidationError):
            settings(config_root, DeploymentEnvironment.Test, "llm.evaluation.generation_timeout_seconds=-1")

    def test_chat_model_config(self, config_root: p.FileUrl) -> None:
        ps = settings(config_root, DeploymentEnvironment.Test, "llm.provider=openai", "llm.model=gpt-4o")
        config = ps.llm.chat_model_config()

        assert config.provider == ProviderType.OpenAI
        assert config.model_name == "gpt-4o"
        assert config.max_tokens == ps.llm.max_tokens


class TestSecrets(object):
    def test_secrets_cascade(self, secrets_root: p.FileUrl) -> None:
        secrets = Secrets(env=DeploymentEnvironment.Test, root=secrets_root)

        assert secrets.llm.google is not None
        assert secrets.llm.google.api_key.get_secret_value() == "test-key"
        assert secrets.llm.openai is not None
        assert secrets.llm.openai.api_key.get_secret_value() == "sk-root"
        assert secrets.llm.anthropic is None

    def test_environment_variable_wins(self, secrets_root: p.FileUrl, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANATOMYGUARD_LLM__GOOGLE__API_KEY", "env-key")

        secrets = Secrets(env=DeploymentEnvironment.Test, root=secrets_root)

        assert secrets.llm.google is not None
        assert secrets.llm.google.api_key.get_secret_value() == "env-key"

    def test_missing_secrets_file(self, tmp_path: Path) -> None:
        secrets = Secrets(env=DeploymentEnvironment.Test, root=p.FileUrl(f"file://{tmp_path}"))

        assert secrets.llm.google is None

    def test_secrets_are_not_rendered(self, secrets_root: p.FileUrl) -> None:
        secrets = Secrets(env=DeploymentEnvironment.Test, root=secrets_root)

        assert "test-key" not in repr(secrets)

    def test_secrets_must_be_a_mapping(self, tmp_path: Path) -> None:
        (tmp_path / "secrets.yaml").write_text("- not\n- a mapping\n")

        with pytest.raises(SettingsError):
            Secrets(env=DeploymentEnvironment.Local, root=p.FileUrl(f"file://{tmp_path}"))


class TestContainer(object):
    def test_booted_configuration(self, container: AnatomyGuardContainer, gateway: MagicMock) -> None:
        assert container.env() is DeploymentEnvironment.Test
        assert container.config.llm.evaluation.generation_timeout_seconds() == 5

        llm = container.llm()
        assert llm.settings().evaluation.generation_timeout_seconds == 5
        assert llm.encoder().max_bytes == 20 * 1024 * 1024
        assert llm.pipeline().timeout == 5
        assert llm.pipeline().gateway is gateway

    def test_logging_configured(self, container: AnatomyGuardContainer) -> None:
        container.logging()

        assert logging.getLogger().level == logging.WARNING
        assert logging.getLevelName(5) == "TRACE"
