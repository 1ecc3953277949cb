__all__ = [
    # Base
    "BaseModel",
    "WireModel",
    # Enums
    "AuditStatus",
    "DeploymentEnvironment",
    "MediaType",
    "ProcessingStatus",
    # Documents
    "EncodedDocument",
    "SourceDocument",
    # Report
    "ActionRecord",
    "EvaluationReport",
    "GeneratedReport",
    "Marks",
    "Observation",
    "QuestionFeedbackRecord",
    "ReportBody",
    "ScoreVerification",
]

from .base import BaseModel, WireModel
from .document import EncodedDocument, SourceDocument
from .enum import AuditStatus, DeploymentEnvironment, MediaType, ProcessingStatus
from .report import ActionRecord, EvaluationReport, GeneratedReport, Marks, Observation, QuestionFeedbackRecord, \
    ReportBody, ScoreVerification
