from __future__ import annotations

import logging

from anatomyguard.model import EvaluationReport, GeneratedReport

from .audit import format_marks, ScoreAuditEngine

logger = logging.getLogger(__name__)


class ReportAssembler(object):
    """Merges a validated generated report with a locally computed audit.

    The generator's own ``scoreVerification`` is replaced wholesale; only its
    ``reportedTotal`` is carried into the audit, as the value read from the
    human feedback document. Question order is kept as generated and
    duplicates are not removed.
    """

    def __init__(self, audit: ScoreAuditEngine | None = None):
        self.audit = audit or ScoreAuditEngine()

    def assemble(self, generated: GeneratedReport) -> EvaluationReport:
        proposed = generated.score_verification
        verification = self.audit.audit(generated.question_wise_feedback, proposed.reported_total)

        if proposed.calculated_total != verification.calculated_total or proposed.status != verification.status:
            logger.info(
                "replaced generated score verification",
                extra={
                    "proposed_total": format_marks(proposed.calculated_total),
                    "proposed_status": proposed.status.value,
                    "calculated_total": format_marks(verification.calculated_total),
                    "status": verification.status.value,
                },
            )

        return EvaluationReport(
            exam_reference=generated.exam_reference,
            evaluation_type=generated.evaluation_type,
            ai_model_role=generated.ai_model_role,
            generalised_feedback=generated.generalised_feedback,
            question_wise_feedback=generated.question_wise_feedback,
            score_verification=verification,
            finalized_feedback=generated.finalized_feedback,
            action_summary=generated.action_summary,
        )
