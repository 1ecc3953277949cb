"""Deterministic score audit.

The generation step proposes a ``calculatedTotal`` and a ``status``, but both
are advisory. The audit recomputes the total from the extracted per-question
marks with exact decimal arithmetic and classifies it against the reported
total, so the result is reproducible and independent of the generator.
"""

from __future__ import annotations

import collections
import decimal
import logging
import typing as t

from anatomyguard.model import AuditStatus, QuestionFeedbackRecord, ScoreVerification

logger = logging.getLogger(__name__)

# enough digits that no realistic sum of marks is ever rounded
PRECISION = 64


def format_marks(value: decimal.Decimal, *, signed: bool = False) -> str:
    """Render marks without exponent or trailing zeros, ``Decimal("7.50")`` -> ``"7.5"``."""
    if value == value.to_integral_value():
        text = format(value.to_integral_value(), "f")
    else:
        text = format(value.normalize(), "f")
    if signed and value > 0:
        return "+" + text
    return text


def _question_key(question_no: str) -> str:
    return question_no.strip().casefold()


def _label(record: QuestionFeedbackRecord) -> str:
    return f"Q{record.question_no.strip()}" if record.question_no.strip().isdigit() else record.question_no.strip()


class ScoreAuditEngine(object):
    """Recomputes and classifies exam totals.

    The engine holds no state; ``audit`` is a pure function of its arguments.
    """

    def total(self, records: t.Iterable[QuestionFeedbackRecord]) -> decimal.Decimal:
        with decimal.localcontext() as ctx:
            ctx.prec = PRECISION
            return sum((r.marks_awarded for r in records), decimal.Decimal(0))

    def anomalies(self, records: t.Sequence[QuestionFeedbackRecord]) -> tuple[str, ...]:
        """Describe per-question marks that break ``0 <= marksAwarded <= maxMarks``.

        The marks themselves are never adjusted.
        """
        found: list[str] = []
        for r in records:
            if r.marks_awarded < 0:
                found.append(f"{_label(r)}: marks awarded ({format_marks(r.marks_awarded)}) are negative")
            if r.max_marks < 0:
                found.append(f"{_label(r)}: maximum marks ({format_marks(r.max_marks)}) are negative")
            if r.marks_awarded > r.max_marks:
                found.append(
                    f"{_label(r)}: marks awarded ({format_marks(r.marks_awarded)}) exceed the maximum"
                    f" ({format_marks(r.max_marks)})"
                )
        return tuple(found)

    def audit(
        self, records: t.Sequence[QuestionFeedbackRecord], reported_total: decimal.Decimal
    ) -> ScoreVerification:
        """Recompute the total of ``records`` and compare it with ``reported_total``.

        Args:
            records: Per-question feedback in document order; duplicates are summed
            reported_total: Total claimed in the human feedback document

        Returns:
            ScoreVerification with a locally computed total and status
        """
        calculated = self.total(records)
        anomalies = self.anomalies(records)
        if anomalies:
            logger.warning("marks anomalies found", extra={"anomalies": list(anomalies)})

        if calculated == reported_total:
            status = AuditStatus.Correct
            explanation = None
        else:
            status = AuditStatus.Incorrect
            explanation = self.explain(records, calculated, reported_total)

        logger.info(
            "score audit complete",
            extra={
                "questions": len(records),
                "calculated_total": format_marks(calculated),
                "reported_total": format_marks(reported_total),
                "status": status.value,
            },
        )
        return ScoreVerification(
            calculated_total=calculated,
            reported_total=reported_total,
            status=status,
            discrepancy_explanation=explanation,
            anomalies=anomalies,
        )

    def explain(
        self,
        records: t.Sequence[QuestionFeedbackRecord],
        calculated: decimal.Decimal,
        reported: decimal.Decimal,
    ) -> str:
        """Explain a mismatch, naming the questions that could account for it."""
        with decimal.localcontext() as ctx:
            ctx.prec = PRECISION
            difference = calculated - reported

        sentences = [
            f"Calculated total {format_marks(calculated)} does not match reported total {format_marks(reported)}"
            f" (discrepancy of {format_marks(difference, signed=True)})."
        ]

        by_question: dict[str, list[QuestionFeedbackRecord]] = collections.defaultdict(list)
        for r in records:
            by_question[_question_key(r.question_no)].append(r)
        duplicated = [rs for rs in by_question.values() if len(rs) > 1]
        if duplicated:
            labels = ", ".join(f"{_label(rs[0])} ({len(rs)} times)" for rs in duplicated)
            sentences.append(f"Duplicated question entries are included in the calculated total: {labels}.")
            extra = sum((r.marks_awarded for rs in duplicated for r in rs[1:]), decimal.Decimal(0))
            if extra == difference:
                sentences.append("The duplicated entries account for the entire discrepancy.")

        matching = [r for r in records if r.marks_awarded == abs(difference)]
        if matching:
            labels = ", ".join(dict.fromkeys(_label(r) for r in matching))
            if difference > 0:
                sentences.append(f"The reported total may have omitted the marks for {labels}.")
            else:
                sentences.append(f"The reported total may have counted the marks for {labels} twice.")

        return " ".join(sentences)
