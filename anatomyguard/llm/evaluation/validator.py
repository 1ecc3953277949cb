"""Parsing and schema validation of generated report payloads."""

from __future__ import annotations

import decimal
import logging
import re
import typing as t

import pydantic as p
from pydantic_core import ErrorDetails

from anatomyguard.lib.json import loads
from anatomyguard.model import GeneratedReport
from anatomyguard.model.report import MARKS_DIGITS

from .errors import MalformedPayload, SchemaViolation
from .migration import migrate_payload
from .request import OUTPUT_SCHEMA

logger = logging.getLogger(__name__)

FENCE_RE = re.compile(r"^```(?:json)?\s*\n?(?P<body>.*?)\n?```$", re.DOTALL | re.IGNORECASE)

ROOT_FIELD = "<root>"

# error types whose expectation is clearer than the schema type alone
EXPECTED_BY_ERROR: dict[str, str] = {
    "numeric_marks": "number or numeric text",
    "marks_range": f"number with at most {MARKS_DIGITS} digits either side of the decimal point",
    "too_short": "non-empty array",
    "enum": "one of 'Correct', 'Incorrect'",
    "tuple_type": "array",
    "list_type": "array",
    "model_type": "object",
    "model_attributes_type": "object",
    "dict_type": "object",
    "string_type": "string",
}


def json_type(value: t.Any) -> str:
    """Name the JSON type of a parsed value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float, decimal.Decimal)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def format_loc(loc: tuple[int | str, ...]) -> str:
    """Render a validation error location as a dotted path, ``("a", 0, "b")`` -> ``"a[0].b"``."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = part
    return path or ROOT_FIELD


def schema_type_at(loc: tuple[int | str, ...], schema: dict[str, t.Any] = OUTPUT_SCHEMA) -> str | None:
    node: dict[str, t.Any] | None = schema
    for part in loc:
        if node is None:
            return None
        if isinstance(part, int):
            node = node.get("items")
        else:
            node = node.get("properties", {}).get(part)
    if node is None:
        return None
    return node.get("type")


class ResponseValidator(object):
    """Turns raw gateway text into a trusted :class:`GeneratedReport`.

    Nothing is defaulted or dropped: a missing or mistyped field is a
    :class:`SchemaViolation` naming that field. Legacy report shapes are
    migrated before validation. Keys must use their camelCase wire names.
    """

    def parse(self, text: str) -> t.Any:
        body = text.strip()
        # tolerate a single markdown fence around the payload
        if match := FENCE_RE.match(body):
            body = match.group("body").strip()

        try:
            return loads(body, exact=True)
        except ValueError as e:
            logger.warning("generated payload is not valid JSON", extra={"reason": str(e), "length": len(text)})
            logger.debug("malformed payload", extra={"raw_text": text})
            raise MalformedPayload(text, reason=str(e)) from e

    def validate(self, text: str) -> GeneratedReport:
        payload = migrate_payload(self.parse(text))
        try:
            report = GeneratedReport.model_validate(payload, by_alias=True, by_name=False)
        except p.ValidationError as e:
            errors = e.errors(include_url=False)
            violation = self._violation(errors[0], len(errors))
            logger.warning(
                "generated payload violates the schema",
                extra={
                    "field": violation.field,
                    "expected": violation.expected,
                    "observed": violation.observed,
                    "violations": violation.violations,
                },
            )
            raise violation from e

        logger.debug(
            "validated generated report",
            extra={"questions": len(report.question_wise_feedback)},
        )
        return report

    def _violation(self, error: ErrorDetails, count: int) -> SchemaViolation:
        loc = tuple(error["loc"])
        kind = error["type"]

        expected = EXPECTED_BY_ERROR.get(kind) or schema_type_at(loc) or error["msg"]
        if kind == "missing":
            observed = "absent"
        elif kind == "too_short":
            observed = "empty array"
        elif kind in ("enum", "marks_range"):
            observed = f"{json_type(error['input'])} {str(error['input'])[:32]!r}"
        else:
            observed = json_type(error["input"])

        return SchemaViolation(format_loc(loc), expected, observed, violations=count)
