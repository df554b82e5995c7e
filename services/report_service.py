"""
services.report_service - Per-store inventory summary reports.

Assembles report data from the store/stock tables, lays the page out as
SVG and converts it to PDF with CairoSVG.  The store logo is fetched
over HTTP and embedded as a PNG data URI; if it cannot be fetched or
decoded the report is rendered without it.
"""

from __future__ import annotations

import base64
import html
import logging
import re
from datetime import date
from io import BytesIO
from typing import Optional

import requests
from PIL import Image
from sqlalchemy.orm import Session

import config
from db.gateway import stores
from services.store_service import top_priciest_books, top_prolific_authors

logger = logging.getLogger(__name__)

USER_AGENT = "BookstoreInventory/1.0"

# A4 in PostScript points
PAGE_W, PAGE_H = 595, 842
MARGIN = 50
LOGO_SIZE = 80


# ── Data ───────────────────────────────────────────────────────────────

def get_store_report_data(session: Session, store_id: str) -> Optional[dict]:
    """Return the report payload for a store, or None if it does not exist."""
    store = stores.find_by_id(store_id, session=session)
    if store is None:
        return None

    top_n = config.REPORT_TOP_N
    priciest = top_priciest_books(session, store_id, top_n)
    prolific = top_prolific_authors(session, store_id, top_n)

    store_data = {"id": store.id, "name": store.name, "address": store.address}
    if store.logo:
        store_data["logo"] = store.logo

    return {
        "store": store_data,
        "topPriciestBooks": [
            {
                "name": sb.book.name,
                "authorName": sb.book.author.name if sb.book.author else "Unknown",
                "price": float(sb.price),
                "pages": sb.book.pages,
            }
            for sb in priciest
        ],
        "topProlificAuthors": [
            {"name": a["name"], "bookCount": a["bookCount"]} for a in prolific
        ],
    }


def report_filename(store_name: str, today: Optional[date] = None) -> str:
    safe = re.sub(r"-+", "-", re.sub(r"[^a-zA-Z0-9]", "-", store_name))
    return f"{safe}-Report-{(today or date.today()).isoformat()}.pdf"


# ── Logo ───────────────────────────────────────────────────────────────

def fetch_logo(url: str, timeout: float = config.LOGO_FETCH_TIMEOUT) -> Optional[str]:
    """
    Download a logo and return it as a PNG data URI sized for the header.
    Returns None on any network or image error.
    """
    try:
        response = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout)
        response.raise_for_status()
        img = Image.open(BytesIO(response.content))
        img = img.convert("RGBA")
        img.thumbnail((LOGO_SIZE * 2, LOGO_SIZE * 2))
        buf = BytesIO()
        img.save(buf, format="PNG")
    except (requests.RequestException, OSError, ValueError) as exc:
        logger.warning(f"Failed to load store logo {url}: {exc}")
        return None
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


# ── Rendering ──────────────────────────────────────────────────────────

def render_report_pdf(report: dict, today: Optional[date] = None) -> bytes:
    logo_uri = None
    if report["store"].get("logo"):
        logo_uri = fetch_logo(report["store"]["logo"])
    svg = build_report_svg(report, logo_uri=logo_uri, today=today)
    return _svg_to_pdf(svg)


def _svg_to_pdf(svg: str) -> bytes:
    import cairosvg
    return cairosvg.svg2pdf(bytestring=svg.encode("utf-8"))


def _text(x, y, s, size=10, weight="normal", anchor="start") -> str:
    return (
        f'<text x="{x}" y="{y}" font-family="Helvetica, Arial, sans-serif" '
        f'font-size="{size}" font-weight="{weight}" text-anchor="{anchor}">'
        f"{html.escape(str(s))}</text>"
    )


def _rule(y, color="#333333", width=1.0) -> str:
    return (
        f'<line x1="{MARGIN}" y1="{y}" x2="{PAGE_W - MARGIN}" y2="{y}" '
        f'stroke="{color}" stroke-width="{width}"/>'
    )


def _section_title(y, title) -> list[str]:
    return [
        _text(MARGIN, y, title, size=16, weight="bold"),
        f'<line x1="{MARGIN}" y1="{y + 3}" x2="{MARGIN + 9 * len(title)}" '
        f'y2="{y + 3}" stroke="#000000" stroke-width="0.8"/>',
    ]


def build_report_svg(report: dict, logo_uri: Optional[str] = None,
                     today: Optional[date] = None) -> str:
    """Lay out the report page as an SVG document string."""
    store = report["store"]
    center = PAGE_W / 2
    parts: list[str] = []
    y = MARGIN

    if logo_uri:
        parts.append(
            f'<image x="{MARGIN}" y="{MARGIN}" width="{LOGO_SIZE}" height="{LOGO_SIZE}" '
            f'href="{html.escape(logo_uri, quote=True)}" '
            f'xlink:href="{html.escape(logo_uri, quote=True)}"/>'
        )
        y += LOGO_SIZE + 10

    # ── Header ──
    y += 24
    parts.append(_text(center, y, store["name"], size=24, weight="bold", anchor="middle"))
    y += 22
    parts.append(_text(center, y, store["address"], size=12, anchor="middle"))
    y += 18
    generated = (today or date.today()).isoformat()
    parts.append(_text(center, y, f"Report Generated: {generated}", size=10, anchor="middle"))
    y += 24
    parts.append(_rule(y))
    y += 30

    # ── Priciest books ──
    parts += _section_title(y, "Top 5 Priciest Books")
    y += 24
    books = report["topPriciestBooks"]
    if not books:
        parts.append(_text(MARGIN, y, "No books available in inventory.", size=11))
        y += 16
    else:
        for x, label in ((50, "#"), (70, "Book Name"), (250, "Author"),
                         (380, "Pages"), (430, "Price")):
            parts.append(_text(x, y, label, weight="bold"))
        y += 6
        parts.append(_rule(y, color="#cccccc", width=0.5))
        y += 16
        for idx, book in enumerate(books, start=1):
            parts.append(_text(50, y, idx))
            parts.append(_text(70, y, book["name"][:30]))
            parts.append(_text(250, y, book["authorName"][:20]))
            parts.append(_text(380, y, book["pages"]))
            parts.append(_text(430, y, f"${book['price']:.2f}"))
            y += 16

    y += 24
    parts.append(_rule(y))
    y += 30

    # ── Prolific authors ──
    parts += _section_title(y, "Top 5 Prolific Authors")
    y += 24
    authors = report["topProlificAuthors"]
    if not authors:
        parts.append(_text(MARGIN, y, "No authors with available books in inventory.", size=11))
        y += 16
    else:
        for x, label in ((50, "#"), (70, "Author Name"), (350, "Number of Books")):
            parts.append(_text(x, y, label, weight="bold"))
        y += 6
        parts.append(_rule(y, color="#cccccc", width=0.5))
        y += 16
        for idx, author in enumerate(authors, start=1):
            parts.append(_text(50, y, idx))
            parts.append(_text(70, y, author["name"]))
            parts.append(_text(350, y, author["bookCount"]))
            y += 16

    y += 32
    parts.append(_text(
        center, y,
        "This report was automatically generated by the Inventory Management System.",
        size=8, anchor="middle",
    ))

    body = "\n  ".join(parts)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<svg xmlns="http://www.w3.org/2000/svg" '
        'xmlns:xlink="http://www.w3.org/1999/xlink" '
        f'width="210mm" height="297mm" viewBox="0 0 {PAGE_W} {PAGE_H}">\n'
        f'  <rect width="{PAGE_W}" height="{PAGE_H}" fill="#ffffff"/>\n'
        f"  {body}\n"
        "</svg>\n"
    )
