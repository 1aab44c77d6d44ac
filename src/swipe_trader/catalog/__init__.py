"""Token catalog: static category tables and AI generated candidates."""

from .catalog import TokenCatalog
from .generator import TokenGenerator, GeminiTokenGenerator, TokenGenerationError
from .icons import resolve_icon, icon_glyph
from .queue import CandidateQueue
from .static import DEFAULT_CATEGORY, UnknownCategoryError

__all__ = [
    "TokenCatalog",
    "TokenGenerator",
    "GeminiTokenGenerator",
    "TokenGenerationError",
    "resolve_icon",
    "icon_glyph",
    "CandidateQueue",
    "DEFAULT_CATEGORY",
    "UnknownCategoryError",
]
