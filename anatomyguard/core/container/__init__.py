__all__ = [
    "AnatomyGuardContainer",
    "BootConfiguration",
    "LLMContainer",
    "TemplateContainer",
]

from .anatomyguard import AnatomyGuardContainer, BootConfiguration
from .llm import LLMContainer
from .template import TemplateContainer
