from __future__ import annotations

import decimal
import typing as t

import pydantic as p
from pydantic_core import PydanticCustomError

from .base import WireModel
from .enum import AuditStatus


# marks are limited to this many digits either side of the decimal point, so
# that any realistic sum of them is exact at the audit's precision
MARKS_DIGITS = 15


def _within_marks_range(d: decimal.Decimal) -> bool:
    _, digits, exponent = d.as_tuple()
    significant = "".join(map(str, digits)).rstrip("0")
    lowest = t.cast(int, exponent) + len(digits) - len(significant)
    return d.adjusted() <= MARKS_DIGITS and lowest >= -MARKS_DIGITS


def coerce_marks(value: t.Any) -> decimal.Decimal:
    """Coerce a marks quantity to an exact decimal.

    Marks arrive from the generation step either as JSON numbers or as
    numeric-looking text ("8", " 7.5 "). Floats are converted through their
    shortest repr so that 0.1 stays 0.1.
    """
    if isinstance(value, bool):
        raise PydanticCustomError("numeric_marks", "Input should be a number or numeric text")
    if isinstance(value, decimal.Decimal):
        d = value
    elif isinstance(value, int):
        d = decimal.Decimal(value)
    elif isinstance(value, float):
        d = decimal.Decimal(repr(value))
    elif isinstance(value, str):
        try:
            d = decimal.Decimal(value.strip())
        except decimal.InvalidOperation:
            raise PydanticCustomError("numeric_marks", "Input should be a number or numeric text") from None
    else:
        raise PydanticCustomError("numeric_marks", "Input should be a number or numeric text")

    if not d.is_finite():
        raise PydanticCustomError("numeric_marks", "Input should be a finite number")
    if not _within_marks_range(d):
        raise PydanticCustomError(
            "marks_range",
            "Input should have at most {digits} digits either side of the decimal point",
            {"digits": MARKS_DIGITS},
        )
    return d


def marks_to_json(value: decimal.Decimal) -> int | float:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


Marks = t.Annotated[
    decimal.Decimal,
    p.BeforeValidator(coerce_marks),
    p.PlainSerializer(marks_to_json, return_type=int | float, when_used="json"),
]


class QuestionFeedbackRecord(WireModel):
    question_no: str
    max_marks: Marks
    marks_awarded: Marks
    key_answer_points: str
    student_answer_summary: str
    human_feedback: str
    ai_feedback_addition: str


class ScoreVerification(WireModel):
    calculated_total: Marks
    reported_total: Marks
    status: AuditStatus
    discrepancy_explanation: str | None = None
    # per-question anomalies such as marks exceeding the maximum; never clamped
    anomalies: tuple[str, ...] = ()


class Observation(WireModel):
    section: str
    observation: str


class ActionRecord(WireModel):
    task: str
    status: str
    evidence: str


class ReportBody(WireModel):
    exam_reference: str
    evaluation_type: str
    ai_model_role: str
    generalised_feedback: str
    question_wise_feedback: tuple[QuestionFeedbackRecord, ...] = p.Field(min_length=1)
    score_verification: ScoreVerification
    finalized_feedback: tuple[Observation, ...]
    action_summary: tuple[ActionRecord, ...]


class GeneratedReport(ReportBody):
    """Schema-conformant output of the generation step.

    Its ``score_verification`` is whatever the generator proposed and is
    advisory only.
    """


class EvaluationReport(ReportBody):
    """The assembled report; ``score_verification`` is computed locally."""
