"""Font selection for kitchen and bar tickets.

Item names and modifiers are typed by staff and often carry non-Latin text,
so tickets prefer a Unicode TrueType font over ReportLab's built-in Helvetica.
"""

from __future__ import annotations

import logging
from pathlib import Path

from floor_ledger.core.config import settings

logger = logging.getLogger(__name__)

TICKET_FONT_NAME: str = "TicketUnicode"
FALLBACK_FONT_NAME: str = "Helvetica"

# Linux first, then Windows and macOS.
FONT_CANDIDATES: list[str] = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    r"C:\\Windows\\Fonts\\arial.ttf",
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
]

_fallback_logged = False


def resolve_ticket_font_path() -> str | None:
    """Return ``TICKET_FONT_PATH`` when it exists, else the first installed candidate."""
    configured = settings.ticket_font_path
    if configured:
        if Path(configured).is_file():
            return configured
        logger.warning("[PRINT] TICKET_FONT_PATH %s does not exist; trying system fonts.", configured)
    for candidate in FONT_CANDIDATES:
        if Path(candidate).is_file():
            return candidate
    return None


def register_ticket_font() -> str:
    """Register the ticket font with ReportLab and return the name to style with."""
    global _fallback_logged

    font_path = resolve_ticket_font_path()
    if font_path is None:
        if not _fallback_logged:
            logger.warning("[PRINT] No Unicode font found; tickets fall back to %s.", FALLBACK_FONT_NAME)
            _fallback_logged = True
        return FALLBACK_FONT_NAME

    from reportlab.pdfbase import pdfmetrics
    from reportlab.pdfbase.ttfonts import TTFont

    if TICKET_FONT_NAME not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(TTFont(TICKET_FONT_NAME, font_path))
    return TICKET_FONT_NAME
