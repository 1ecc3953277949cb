__all__ = [
    "EvaluationSettings",
    "EvaluatorWebSettings",
    "LLMSecrets",
    "LLMSettings",
    "LoggingSettings",
    "Secrets",
    "ServeSettings",
    "Settings",
    "TemplateSettings",
    "WebSettings",
]


from .llm import EvaluationSettings, LLMSettings
from .logging import LoggingSettings
from .secrets import LLMSecrets, Secrets
from .settings import Settings
from .template import TemplateSettings
from .web import EvaluatorWebSettings, ServeSettings, WebSettings
