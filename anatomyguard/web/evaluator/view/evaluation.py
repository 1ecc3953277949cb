from anatomyguard.model import BaseModel, EncodedDocument, WireModel


class EvaluationRequest(WireModel):
    artifact: EncodedDocument
    human_feedback: EncodedDocument


class ErrorView(BaseModel):
    error: str
