"""Exceptions raised by the evaluation pipeline.

Every exception carries a machine-readable ``code`` and a ``user_message``
that is safe to show to an end user. Diagnostic detail (raw payloads, vendor
error text) stays on the exception object or its ``__cause__``.
"""

from __future__ import annotations

import typing as t


class EvaluationError(Exception):
    """Base class for all failures that end an evaluation attempt."""

    code: t.ClassVar[str] = "evaluation_error"

    def __init__(self, user_message: str):
        super().__init__(user_message)
        self.user_message = user_message


class IngestionError(EvaluationError):
    """The input documents could not be accepted."""

    code = "ingestion_error"


class UnsupportedMediaType(IngestionError):
    code = "unsupported_media_type"

    def __init__(self, name: str, media_type: str, allowed: t.Iterable[str]):
        self.name = name
        self.media_type = media_type
        self.allowed = tuple(allowed)
        super().__init__(
            f"Document {name!r} has unsupported media type {media_type!r}; expected one of: {', '.join(self.allowed)}"
        )


class EmptyDocument(IngestionError):
    code = "empty_document"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Document {name!r} is empty")


class DocumentTooLarge(IngestionError):
    code = "document_too_large"

    def __init__(self, name: str, size: int, limit: int):
        self.name = name
        self.size = size
        self.limit = limit
        super().__init__(f"Document {name!r} is {size} bytes, which exceeds the limit of {limit} bytes")


class UndecodableDocument(IngestionError):
    code = "undecodable_document"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Document {name!r} content is not valid base64")


class TransportError(EvaluationError):
    """The generation step could not produce a response."""

    code = "transport_error"


class GatewayUnavailable(TransportError):
    code = "gateway_unavailable"

    def __init__(self, detail: str | None = None):
        # detail is for logs only
        self.detail = detail
        super().__init__("The report generation service is currently unavailable. Please try again.")


class EmptyResponse(TransportError):
    code = "empty_response"

    def __init__(self):
        super().__init__("The report generation service returned an empty response.")


class PayloadError(EvaluationError):
    """The generation step responded, but the payload cannot be trusted."""

    code = "payload_error"


class MalformedPayload(PayloadError):
    code = "malformed_payload"

    def __init__(self, raw_text: str, reason: str | None = None):
        self.raw_text = raw_text
        self.reason = reason
        super().__init__("The generated report could not be parsed as JSON.")


class SchemaViolation(PayloadError):
    code = "schema_violation"

    def __init__(self, field: str, expected: str, observed: str, violations: int = 1):
        self.field = field
        self.expected = expected
        self.observed = observed
        self.violations = violations
        message = f"The generated report is invalid at {field!r}: expected {expected}, got {observed}"
        if violations > 1:
            message += f" ({violations - 1} further violation{'s' if violations > 2 else ''})"
        super().__init__(message)


class EvaluationInProgress(EvaluationError):
    code = "evaluation_in_progress"

    def __init__(self):
        super().__init__("An evaluation is already running for this session.")


class EvaluationCancelled(EvaluationError):
    code = "evaluation_cancelled"

    def __init__(self):
        super().__init__("The evaluation was cancelled.")
