__all__ = [
    "create_app",
]

from .main import create_app
