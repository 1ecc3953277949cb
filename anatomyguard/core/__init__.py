__all__ = [
    "AnatomyGuardContainer",
    "BootConfiguration",
    "di",
    "LoggingProvider",
    "Settings",
    "Secrets",
]


from . import di
from .config import Secrets, Settings
from .container import AnatomyGuardContainer, BootConfiguration
from .provider import LoggingProvider
