__all__ = [
    # Pipeline
    "EvaluationPipeline",
    "EvaluationSession",
    # Components
    "ChatModelGateway",
    "DocumentEncoder",
    "GeminiGateway",
    "GenerationGateway",
    "GenerationRequest",
    "ReportAssembler",
    "ReportRequestBuilder",
    "ResponseValidator",
    "ScoreAuditEngine",
    "migrate_payload",
    "output_schema",
    # Errors
    "DocumentTooLarge",
    "EmptyDocument",
    "EmptyResponse",
    "EvaluationCancelled",
    "EvaluationError",
    "EvaluationInProgress",
    "GatewayUnavailable",
    "IngestionError",
    "MalformedPayload",
    "PayloadError",
    "SchemaViolation",
    "TransportError",
    "UndecodableDocument",
    "UnsupportedMediaType",
]

from .assembler import ReportAssembler
from .audit import ScoreAuditEngine
from .encoder import DocumentEncoder
from .errors import DocumentTooLarge, EmptyDocument, EmptyResponse, EvaluationCancelled, EvaluationError, \
    EvaluationInProgress, GatewayUnavailable, IngestionError, MalformedPayload, PayloadError, SchemaViolation, \
    TransportError, UndecodableDocument, UnsupportedMediaType
from .gateway import ChatModelGateway, GeminiGateway, GenerationGateway
from .migration import migrate_payload
from .pipeline import EvaluationPipeline, EvaluationSession
from .request import GenerationRequest, output_schema, ReportRequestBuilder
from .validator import ResponseValidator
