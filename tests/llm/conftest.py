"""Fixtures for LLM tests."""

from __future__ import annotations

import jinja2
import pytest

from anatomyguard.core import AnatomyGuardContainer
from anatomyguard.llm.evaluation import DocumentEncoder, ReportRequestBuilder


@pytest.fixture(scope="session")
def llm_env(container: AnatomyGuardContainer) -> jinja2.Environment:
    """Provide the LLM Jinja2 environment from the DI container."""
    return container.template().llm()


@pytest.fixture
def encoder() -> DocumentEncoder:
    return DocumentEncoder()


@pytest.fixture
def builder(llm_env: jinja2.Environment) -> ReportRequestBuilder:
    return ReportRequestBuilder(llm_env)
