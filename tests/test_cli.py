"""Tests for the evaluate command group."""

from __future__ import annotations

import json
import typing as t
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from click.testing import CliRunner

from anatomyguard.cli.evaluate import evaluate
from anatomyguard.core import AnatomyGuardContainer
from anatomyguard.model import SourceDocument


@pytest.fixture
def runner(container: AnatomyGuardContainer) -> CliRunner:
    container.wire(modules=["anatomyguard.cli.evaluate"])
    return CliRunner()


@pytest.fixture
def documents(tmp_path: Path, artifact: SourceDocument, feedback: SourceDocument) -> tuple[Path, Path]:
    artifact_path = tmp_path / "scripts.pdf"
    artifact_path.write_bytes(artifact.data)
    feedback_path = tmp_path / "feedback.docx"
    feedback_path.write_bytes(feedback.data)
    return artifact_path, feedback_path


class TestEvaluateRun(object):
    def test_prints_report(
        self,
        runner: CliRunner,
        gateway: MagicMock,
        documents: tuple[Path, Path],
        payload_factory: t.Callable[..., dict[str, t.Any]],
    ) -> None:
        gateway.generate.return_value = json.dumps(payload_factory(marks=("8", "12"), reported_total=20))

        result = runner.invoke(evaluate, ["run", *map(str, documents)])

        assert result.exit_code == 0, result.output
        report = json.loads(result.stdout)
        assert report["scoreVerification"]["status"] == "Correct"
        assert "anomaly: Q2: marks awarded (12) exceed the maximum (10)" in result.stderr

    def test_writes_output_file(
        self,
        runner: CliRunner,
        gateway: MagicMock,
        documents: tuple[Path, Path],
        payload_factory: t.Callable[..., dict[str, t.Any]],
        tmp_path: Path,
    ) -> None:
        gateway.generate.return_value = json.dumps(payload_factory(reported_total=26))
        output = tmp_path / "report.json"

        result = runner.invoke(evaluate, ["run", *map(str, documents), "-O", str(output)])

        assert result.exit_code == 0, result.output
        report = json.loads(output.read_text())
        assert report["scoreVerification"]["status"] == "Incorrect"
        assert "score audit: Incorrect" in result.stderr

    def test_rejects_unknown_document_type(
        self, runner: CliRunner, gateway: MagicMock, documents: tuple[Path, Path], tmp_path: Path
    ) -> None:
        notes = tmp_path / "notes.txt"
        notes.write_text("not an exam")

        result = runner.invoke(evaluate, ["run", str(notes), str(documents[1])])

        assert result.exit_code != 0
        gateway.generate.assert_not_called()


class TestEvaluateSchema(object):
    def test_prints_schema(self) -> None:
        result = CliRunner().invoke(evaluate, ["schema"])

        assert result.exit_code == 0
        schema = json.loads(result.stdout)
        assert schema["properties"]["scoreVerification"]["required"] == ["calculatedTotal", "reportedTotal", "status"]
