"""HTTP clients."""

from .cdn import CDNClient

__all__ = ["CDNClient"]
