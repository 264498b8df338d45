"""PDF rendering of kitchen (KOT) and bar (BOT) tickets."""

from __future__ import annotations

import re
from datetime import datetime
from io import BytesIO
from typing import Any

from floor_ledger.schemas.order import Order, OrderItem
from floor_ledger.schemas.table import Table
from floor_ledger.utils.pdf_fonts import register_ticket_font

TICKET_SECTIONS: dict[str, str] = {"KOT": "Kitchen Order Ticket", "BOT": "Bar Order Ticket"}
TICKET_WIDTH_MM: int = 80


def _reportlab():
    from reportlab.lib.pagesizes import A4
    from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
    from reportlab.lib.units import mm
    from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer

    return {
        "A4": A4,
        "mm": mm,
        "ParagraphStyle": ParagraphStyle,
        "getSampleStyleSheet": getSampleStyleSheet,
        "PageBreak": PageBreak,
        "Paragraph": Paragraph,
        "SimpleDocTemplate": SimpleDocTemplate,
        "Spacer": Spacer,
    }


def sanitize_filename(value: str, max_length: int = 80) -> str:
    """Return a filesystem-friendly filename fragment."""
    normalized = re.sub(r"[\\/:*?\"<>|]+", "_", (value or "").strip())
    normalized = re.sub(r"\s+", "_", normalized)
    normalized = re.sub(r"_+", "_", normalized).strip("._")
    return (normalized or "ticket")[:max_length]


def group_items_by_ticket(items: list[OrderItem]) -> dict[str, list[OrderItem]]:
    """Split order lines into KOT and BOT sections, dropping empty sections."""
    grouped: dict[str, list[OrderItem]] = {section: [] for section in TICKET_SECTIONS}
    for item in items:
        grouped.setdefault(item.order_type, []).append(item)
    return {section: lines for section, lines in grouped.items() if lines}


def _build_styles() -> dict[str, Any]:
    font_name = register_ticket_font()
    rl = _reportlab()
    styles = rl["getSampleStyleSheet"]()
    return {
        "font_name": font_name,
        "title": rl["ParagraphStyle"]("TicketTitle", parent=styles["Heading3"], fontName=font_name),
        "line": rl["ParagraphStyle"]("TicketLine", parent=styles["Normal"], fontName=font_name, fontSize=11, leading=14),
        "note": rl["ParagraphStyle"]("TicketNote", parent=styles["Normal"], fontName=font_name, fontSize=8, leading=10),
    }


def _section_story(section: str, items: list[OrderItem], order: Order, table: Table | None, printed_at: datetime, styles: dict[str, Any]) -> list[Any]:
    rl = _reportlab()
    table_label = table.name if table is not None else order.table_id
    story: list[Any] = [
        rl["Paragraph"](TICKET_SECTIONS.get(section, section), styles["title"]),
        rl["Paragraph"](f"Table: {table_label}", styles["line"]),
        rl["Paragraph"](f"Order: {order.id[-6:]} • {printed_at.strftime('%Y-%m-%d %H:%M')}", styles["note"]),
        rl["Spacer"](1, 6),
    ]
    for item in items:
        story.append(rl["Paragraph"](f"{item.quantity} x {item.name}", styles["line"]))
        if item.modifiers:
            story.append(rl["Paragraph"](f"  ({', '.join(item.modifiers)})", styles["note"]))
    return story


def render_ticket_pdf(order: Order, table: Table | None, printed_at: datetime) -> bytes:
    """Render one page per ticket section for the order's lines."""
    styles = _build_styles()
    rl = _reportlab()
    grouped = group_items_by_ticket(order.items)

    story: list[Any] = []
    for index, (section, items) in enumerate(grouped.items()):
        story.extend(_section_story(section, items, order, table, printed_at, styles))
        if index < len(grouped) - 1:
            story.append(rl["PageBreak"]())

    buffer = BytesIO()
    page_size = (TICKET_WIDTH_MM * rl["mm"], rl["A4"][1])
    margin = 4 * rl["mm"]
    rl["SimpleDocTemplate"](
        buffer,
        pagesize=page_size,
        leftMargin=margin,
        rightMargin=margin,
        topMargin=margin,
        bottomMargin=margin,
    ).build(story)
    return buffer.getvalue()
