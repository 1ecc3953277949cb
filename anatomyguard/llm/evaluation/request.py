"""Generation request construction and the output schema contract."""

from __future__ import annotations

import copy
import logging
import typing as t
from dataclasses import dataclass

import jinja2

from anatomyguard.model import EncodedDocument

logger = logging.getLogger(__name__)

INSTRUCTION_TEMPLATE = "evaluation/instruction.j2"
CROSS_REFERENCE_TEMPLATE = "evaluation/cross_reference.j2"


def _object(properties: dict[str, t.Any], *, optional: t.Iterable[str] = ()) -> dict[str, t.Any]:
    skip = set(optional)
    return {
        "type": "object",
        "properties": properties,
        "required": [k for k in properties if k not in skip],
    }


def _string(description: str | None = None) -> dict[str, t.Any]:
    if description is None:
        return {"type": "string"}
    return {"type": "string", "description": description}


# marks are strings in the contract because evaluators write things like "7.5"
# or "8 "; they are coerced to exact decimals on validation
OUTPUT_SCHEMA: t.Final[dict[str, t.Any]] = _object({
    "examReference": _string("The artifact bundle's file name."),
    "evaluationType": _string(),
    "aiModelRole": _string(),
    "generalisedFeedback": _string(
        "The human evaluator's overall feedback, elaborated into 3 to 5 sentences without unsupported facts."
    ),
    "questionWiseFeedback": {
        "type": "array",
        "minItems": 1,
        "items": _object({
            "questionNo": _string(),
            "maxMarks": _string(),
            "marksAwarded": _string("Marks exactly as awarded by the human evaluator."),
            "keyAnswerPoints": _string(),
            "studentAnswerSummary": _string(),
            "humanFeedback": _string("The human evaluator's comment, verbatim."),
            "aiFeedbackAddition": _string("Exactly one line naming a missed detail from the key."),
        }),
    },
    "scoreVerification": _object(
        {
            "calculatedTotal": {"type": "number"},
            "reportedTotal": {"type": "number", "description": "Total as reported in the human feedback document."},
            "status": {"type": "string", "enum": ["Correct", "Incorrect"]},
            "discrepancyExplanation": _string(),
        },
        optional=["discrepancyExplanation"],
    ),
    "finalizedFeedback": {
        "type": "array",
        "items": _object({
            "section": _string(),
            "observation": _string(),
        }),
    },
    "actionSummary": {
        "type": "array",
        "items": _object({
            "task": _string(),
            "status": _string(),
            "evidence": _string(),
        }),
    },
})


def output_schema() -> dict[str, t.Any]:
    """Return a copy of the output schema contract that callers may mutate."""
    return copy.deepcopy(OUTPUT_SCHEMA)


@dataclass(frozen=True)
class GenerationRequest:
    """Everything the generation gateway needs for one evaluation."""

    instruction: str
    cross_reference: str
    documents: tuple[EncodedDocument, EncodedDocument]
    schema: dict[str, t.Any]

    @property
    def text_parts(self) -> tuple[str, str]:
        return self.instruction, self.cross_reference

    @property
    def artifact(self) -> EncodedDocument:
        return self.documents[0]

    @property
    def feedback(self) -> EncodedDocument:
        return self.documents[1]


class ReportRequestBuilder(object):
    """Builds a :class:`GenerationRequest` from the two encoded documents.

    The instruction text is fixed; it lives in a prompt template so that it can
    be read and reviewed apart from the code.
    """

    def __init__(self, env: jinja2.Environment):
        self._env = env

    def instruction(self) -> str:
        return self._env.get_template(INSTRUCTION_TEMPLATE).render().strip()

    def build(self, artifact: EncodedDocument, feedback: EncodedDocument) -> GenerationRequest:
        cross_reference = self._env.get_template(CROSS_REFERENCE_TEMPLATE).render(
            artifact=artifact,
            feedback=feedback,
        )
        request = GenerationRequest(
            instruction=self.instruction(),
            cross_reference=cross_reference.strip(),
            documents=(artifact, feedback),
            schema=output_schema(),
        )
        logger.debug(
            "built generation request",
            extra={
                "artifact": artifact.name,
                "feedback": feedback.name,
                "instruction_length": len(request.instruction),
            },
        )
        return request
