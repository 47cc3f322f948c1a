"""Live preview rendering."""

from ..registry import Element
from .live import FALLBACK_MARKER, MISSING_MARKER, LiveRenderer, RenderError, invoke

__all__ = ["Element", "FALLBACK_MARKER", "MISSING_MARKER", "LiveRenderer", "RenderError", "invoke"]
