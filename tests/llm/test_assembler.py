"""Tests for merging generated output with the local audit."""

from __future__ import annotations

import decimal
import typing as t
from unittest.mock import MagicMock

from anatomyguard.llm.evaluation import ReportAssembler, ScoreAuditEngine
from anatomyguard.model import AuditStatus, EvaluationReport, GeneratedReport

PayloadFactory = t.Callable[..., dict[str, t.Any]]


def _generated(payload: dict[str, t.Any]) -> GeneratedReport:
    return GeneratedReport.model_validate(payload)


class TestReportAssembler(object):
    def test_replaces_proposed_audit(self, payload_factory: PayloadFactory) -> None:
        # the generator claims the total matches; it does not
        generated = _generated(payload_factory(reported_total=24, calculated_total=24, status="Correct"))

        report = ReportAssembler().assemble(generated)

        assert isinstance(report, EvaluationReport)
        verification = report.score_verification
        assert verification.calculated_total == decimal.Decimal(25)
        assert verification.reported_total == decimal.Decimal(24)
        assert verification.status is AuditStatus.Incorrect
        assert verification.discrepancy_explanation is not None
        assert "+1" in verification.discrepancy_explanation

    def test_discards_proposed_explanation_when_correct(self, payload_factory: PayloadFactory) -> None:
        payload = payload_factory(reported_total=25, calculated_total=26, status="Incorrect")
        payload["scoreVerification"]["discrepancyExplanation"] = "Question 2 was counted twice."

        report = ReportAssembler().assemble(_generated(payload))

        assert report.score_verification.status is AuditStatus.Correct
        assert report.score_verification.calculated_total == decimal.Decimal(25)
        assert report.score_verification.discrepancy_explanation is None

    def test_preserves_order_and_duplicates(
        self, payload_factory: PayloadFactory, question_factory: PayloadFactory
    ) -> None:
        questions = [question_factory("2", "7"), question_factory("1", "8"), question_factory("2", "7")]
        generated = _generated(payload_factory(questionWiseFeedback=questions, reported_total=15))

        report = ReportAssembler().assemble(generated)

        assert [q.question_no for q in report.question_wise_feedback] == ["2", "1", "2"]
        assert report.score_verification.calculated_total == decimal.Decimal(22)
        assert report.score_verification.status is AuditStatus.Incorrect

    def test_copies_generated_fields(self, payload_factory: PayloadFactory) -> None:
        generated = _generated(payload_factory())

        report = ReportAssembler().assemble(generated)

        assert report.exam_reference == generated.exam_reference
        assert report.evaluation_type == generated.evaluation_type
        assert report.ai_model_role == generated.ai_model_role
        assert report.generalised_feedback == generated.generalised_feedback
        assert report.question_wise_feedback == generated.question_wise_feedback
        assert report.finalized_feedback == generated.finalized_feedback
        assert report.action_summary == generated.action_summary

    def test_uses_injected_audit_engine(self, payload_factory: PayloadFactory) -> None:
        generated = _generated(payload_factory())
        audit = MagicMock(spec=ScoreAuditEngine)
        audit.audit.return_value = generated.score_verification

        ReportAssembler(audit=audit).assemble(generated)

        audit.audit.assert_called_once_with(generated.question_wise_feedback, decimal.Decimal(25))

    def test_serializes_with_wire_names_and_numbers(self, payload_factory: PayloadFactory) -> None:
        report = ReportAssembler().assemble(_generated(payload_factory(marks=["7.5", "8", "9.5"])))

        dumped = report.model_dump(mode="json")

        assert dumped["scoreVerification"]["calculatedTotal"] == 25
        assert dumped["scoreVerification"]["status"] == "Correct"
        assert dumped["questionWiseFeedback"][0]["marksAwarded"] == 7.5
        assert "discrepancyExplanation" in dumped["scoreVerification"]
