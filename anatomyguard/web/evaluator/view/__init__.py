__all__ = [
    "ErrorView",
    "EvaluationRequest",
]

from .evaluation import ErrorView, EvaluationRequest
