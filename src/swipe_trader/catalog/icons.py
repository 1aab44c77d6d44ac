"""Token icon resolution."""

from typing import Dict

from ..core.enums import TokenIcon
from ..core.models import Candidate

ICON_GLYPHS: Dict[TokenIcon, str] = {
    TokenIcon.DOGE: "(D)",
    TokenIcon.SHIB: "(S)",
    TokenIcon.PEPE: "(P)",
    TokenIcon.FLOKI: "(F)",
    TokenIcon.BABYDOGE: "(b)",
    TokenIcon.BTC: "(B)",
    TokenIcon.ETH: "(E)",
    TokenIcon.AI: "[AI]",
}

SYMBOL_ICONS: Dict[str, TokenIcon] = {
    "DOGE": TokenIcon.DOGE,
    "SHIB": TokenIcon.SHIB,
    "PEPE": TokenIcon.PEPE,
    "FLOKI": TokenIcon.FLOKI,
    "BABYDOGE": TokenIcon.BABYDOGE,
    "BTC": TokenIcon.BTC,
    "ETH": TokenIcon.ETH,
}


def resolve_icon(candidate: Candidate) -> TokenIcon:
    """Pick the icon variant for a candidate.

    Explicit icon first, then AI badge for generated tokens, then a symbol
    match, and DEFAULT otherwise.
    """
    if candidate.icon is not None:
        return candidate.icon
    if candidate.is_generated:
        return TokenIcon.AI
    return SYMBOL_ICONS.get(candidate.symbol.upper(), TokenIcon.DEFAULT)


def icon_glyph(candidate: Candidate) -> str:
    """Text glyph for a candidate; DEFAULT renders the symbol initial."""
    icon = resolve_icon(candidate)
    glyph = ICON_GLYPHS.get(icon)
    if glyph is None:
        return f"({candidate.symbol[:1].upper() or '?'})"
    return glyph
