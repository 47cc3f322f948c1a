"""
Generation Backends
Importing this package registers the bundled targets.
"""

from .base import Backend, available_targets, get_backend, register_backend
from .react import ReactBackend
from .vue import VueBackend

__all__ = [
    "Backend",
    "available_targets",
    "get_backend",
    "register_backend",
    "ReactBackend",
    "VueBackend",
]
