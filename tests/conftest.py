"""Pytest fixtures for AnatomyGuard tests.

The DI container is booted once per session against the ``test`` environment
of the repository's ``config/`` directory. No generation provider is ever
called: tests that reach the gateway override it with a mock.

Usage:
    def test_evaluate(client: TestClient, gateway: MagicMock, payload_factory):
        gateway.generate.return_value = json.dumps(payload_factory())
        response = client.post("/api/evaluations", json=...)
"""

from __future__ import annotations

import base64
import os
import typing as t
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pydantic as p
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

import anatomyguard
from anatomyguard.core import AnatomyGuardContainer
from anatomyguard.model import DeploymentEnvironment, EncodedDocument, QuestionFeedbackRecord, SourceDocument

PDF_BYTES = b"%PDF-1.4\n1 0 obj << /Type /Catalog >> endobj\ntrailer << /Root 1 0 R >>\n%%EOF\n"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOCX_BYTES = b"PK\x03\x04\x14\x00\x06\x00word/document.xml"


@pytest.fixture(scope="session")
def config_root() -> p.FileUrl:
    root = Path(os.path.dirname(anatomyguard.__file__)).parent
    return p.FileUrl(f"file://{root}/config")


@pytest.fixture(scope="session")
def container(config_root: p.FileUrl) -> t.Iterator[AnatomyGuardContainer]:
    """Boot the DI container for the test session."""
    ct = AnatomyGuardContainer()

    AnatomyGuardContainer.boot(
        ct,
        debug=False,
        env=DeploymentEnvironment.Test,
        config_root=config_root,
        override=(),
    )

    yield ct

    ct.shutdown_resources()


@pytest.fixture(scope="session")
def app(container: AnatomyGuardContainer) -> FastAPI:
    """Create the relay application from the booted container."""
    from anatomyguard.core.config import EvaluatorWebSettings
    from anatomyguard.web.evaluator.main import _create_app  # pyright: ignore[reportPrivateUsage]

    container.wire(
        modules=[
            "anatomyguard.web.evaluator.main",
            "anatomyguard.web.evaluator.route.evaluation",
        ]
    )

    return _create_app(
        config=EvaluatorWebSettings(**container.config.web.evaluator()),
        env=DeploymentEnvironment.Test,
    )


@pytest.fixture
def gateway(container: AnatomyGuardContainer) -> t.Iterator[MagicMock]:
    """Replace the generation gateway with a mock for the duration of a test."""
    mock = MagicMock()
    mock.generate = AsyncMock()
    container.llm().gateway.override(mock)

    yield mock

    container.llm().gateway.reset_override()


@pytest.fixture
def client(app: FastAPI, gateway: MagicMock) -> t.Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def question_factory() -> t.Callable[..., dict[str, t.Any]]:
    """Factory for one ``questionWiseFeedback`` entry as the generator emits it."""

    def create(
        question_no: str = "1",
        marks_awarded: t.Any = "8",
        max_marks: t.Any = "10",
        **overrides: t.Any,
    ) -> dict[str, t.Any]:
        question = {
            "questionNo": question_no,
            "maxMarks": max_marks,
            "marksAwarded": marks_awarded,
            "keyAnswerPoints": "Origin, insertion, nerve supply and action of deltoid.",
            "studentAnswerSummary": "Described origin and action; nerve supply omitted.",
            "humanFeedback": "Good attempt, revise innervation.",
            "aiFeedbackAddition": "State that deltoid is supplied by the axillary nerve (C5, C6).",
        }
        question.update(overrides)
        return question

    return create


@pytest.fixture
def payload_factory(question_factory: t.Callable[..., dict[str, t.Any]]) -> t.Callable[..., dict[str, t.Any]]:
    """Factory for a complete generated payload.

    ``marks`` gives the ``marksAwarded`` of each question in order; the
    proposed audit fields default to the generator agreeing with itself.
    """

    def create(
        marks: t.Sequence[t.Any] = ("8", "7", "10"),
        reported_total: t.Any = 25,
        calculated_total: t.Any = None,
        status: str = "Correct",
        **overrides: t.Any,
    ) -> dict[str, t.Any]:
        payload = {
            "examReference": "anatomy-upper-limb-batch-3.pdf",
            "evaluationType": "Written examination",
            "aiModelRole": "Supplementary evaluator",
            "generalisedFeedback": "The student shows sound knowledge of the upper limb.",
            "questionWiseFeedback": [question_factory(str(i + 1), m) for i, m in enumerate(marks)],
            "scoreVerification": {
                "calculatedTotal": reported_total if calculated_total is None else calculated_total,
                "reportedTotal": reported_total,
                "status": status,
            },
            "finalizedFeedback": [
                {"section": "Neuroanatomy", "observation": "Innervation is consistently omitted."},
            ],
            "actionSummary": [
                {"task": "Score audit", "status": "Completed", "evidence": "Summed three questions."},
            ],
        }
        payload.update(overrides)
        return payload

    return create


@pytest.fixture
def record_factory() -> t.Callable[..., QuestionFeedbackRecord]:
    def create(question_no: str = "1", marks_awarded: t.Any = 8, max_marks: t.Any = 10) -> QuestionFeedbackRecord:
        return QuestionFeedbackRecord(
            question_no=question_no,
            max_marks=max_marks,
            marks_awarded=marks_awarded,
            key_answer_points="key",
            student_answer_summary="summary",
            human_feedback="comment",
            ai_feedback_addition="addition",
        )

    return create


@pytest.fixture
def artifact() -> SourceDocument:
    return SourceDocument(name="anatomy-upper-limb-batch-3.pdf", media_type="application/pdf", data=PDF_BYTES)


@pytest.fixture
def feedback() -> SourceDocument:
    return SourceDocument(name="evaluator-feedback.docx", media_type=DOCX_MEDIA_TYPE, data=DOCX_BYTES)


@pytest.fixture
def encoded_artifact(artifact: SourceDocument) -> EncodedDocument:
    return EncodedDocument(
        name=artifact.name, media_type=artifact.media_type, content=base64.b64encode(artifact.data).decode()
    )


@pytest.fixture
def encoded_feedback(feedback: SourceDocument) -> EncodedDocument:
    return EncodedDocument(
        name=feedback.name, media_type=feedback.media_type, content=base64.b64encode(feedback.data).decode()
    )