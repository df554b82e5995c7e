from datetime import date
from decimal import Decimal
from io import BytesIO

import pytest
import requests
from PIL import Image

from services import report_service
from services.report_service import (
    build_report_svg,
    fetch_logo,
    get_store_report_data,
    render_report_pdf,
    report_filename,
)
from services.store_service import list_stores, top_priciest_books, top_prolific_authors
from tests.factories import AuthorFactory, BookFactory, StoreBookFactory, StoreFactory


class _FakeResponse:

    def __init__(self, content=b"", status=200):
        self.content = content
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


def _png_bytes(size=(400, 200)):
    buf = BytesIO()
    Image.new("RGB", size, (200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()


class TestReportData:

    def test_unknown_store(self, session):
        assert get_store_report_data(session, "00000000-0000-4000-8000-000000000000") is None

    def test_store_without_stock(self, session):
        store = StoreFactory(name="Empty Shelf", address="1 Nowhere")
        data = get_store_report_data(session, store.id)
        assert data["store"] == {"id": store.id, "name": "Empty Shelf", "address": "1 Nowhere"}
        assert data["topPriciestBooks"] == []
        assert data["topProlificAuthors"] == []

    def test_logo_included_only_when_set(self, session):
        store = StoreFactory(logo="https://cdn.example.com/logo.png")
        data = get_store_report_data(session, store.id)
        assert data["store"]["logo"] == "https://cdn.example.com/logo.png"

    def test_priciest_books_are_sorted_and_capped(self, session):
        store = StoreFactory()
        for price in ["3.00", "25.00", "7.50", "19.99", "1.00", "12.00", "30.00"]:
            StoreBookFactory(store=store, price=Decimal(price))

        data = get_store_report_data(session, store.id)
        prices = [b["price"] for b in data["topPriciestBooks"]]
        assert prices == [30.0, 25.0, 19.99, 12.0, 7.5]
        first = data["topPriciestBooks"][0]
        assert set(first) == {"name", "authorName", "price", "pages"}

    def test_prolific_authors_count_distinct_in_stock_books(self, session):
        store = StoreFactory()
        other_store = StoreFactory()
        busy = AuthorFactory(name="Busy")
        quiet = AuthorFactory(name="Quiet")

        for _ in range(3):
            StoreBookFactory(store=store, book=BookFactory(author=busy))
        StoreBookFactory(store=store, book=BookFactory(author=busy), copies=0)
        StoreBookFactory(store=store, book=BookFactory(author=quiet))
        for _ in range(4):
            StoreBookFactory(store=other_store, book=BookFactory(author=quiet))

        ranked = top_prolific_authors(session, store.id)
        assert [(a["name"], a["bookCount"]) for a in ranked] == [("Busy", 3), ("Quiet", 1)]

    def test_prolific_author_ties_keep_first_seen_order(self, session):
        store = StoreFactory()
        for name in ("Zed", "Amy", "Mid"):
            StoreBookFactory(store=store, book=BookFactory(author=AuthorFactory(name=name)))

        ranked = top_prolific_authors(session, store.id)
        assert [a["name"] for a in ranked] == ["Zed", "Amy", "Mid"]
        assert all(a["bookCount"] == 1 for a in ranked)

    def test_prolific_authors_limit(self, session):
        store = StoreFactory()
        for _ in range(7):
            StoreBookFactory(store=store)
        assert len(top_prolific_authors(session, store.id)) == 5
        assert len(top_priciest_books(session, store.id, limit=2)) == 2

    def test_list_stores_ordered_by_name(self, session):
        StoreFactory(name="Zebra")
        StoreFactory(name="Aardvark")
        assert [s.name for s in list_stores(session)] == ["Aardvark", "Zebra"]


@pytest.mark.parametrize("name,expected", [
    ("Harbour Books", "Harbour-Books-Report-2024-03-09.pdf"),
    ("A & B  / C", "A-B-C-Report-2024-03-09.pdf"),
])
def test_report_filename(name, expected):
    assert report_filename(name, today=date(2024, 3, 9)) == expected


class TestFetchLogo:

    def test_returns_png_data_uri(self, monkeypatch):
        monkeypatch.setattr(requests, "get", lambda *a, **kw: _FakeResponse(_png_bytes()))
        uri = fetch_logo("https://cdn.example.com/logo.png")
        assert uri.startswith("data:image/png;base64,")

    def test_http_error_is_swallowed(self, monkeypatch, caplog):
        monkeypatch.setattr(requests, "get", lambda *a, **kw: _FakeResponse(status=404))
        assert fetch_logo("https://cdn.example.com/missing.png") is None
        assert "Failed to load store logo" in caplog.text

    def test_network_error_is_swallowed(self, monkeypatch):
        def _refuse(*a, **kw):
            raise requests.ConnectionError("refused")

        monkeypatch.setattr(requests, "get", _refuse)
        assert fetch_logo("https://unreachable.invalid/logo.png") is None

    def test_non_image_is_swallowed(self, monkeypatch):
        monkeypatch.setattr(requests, "get", lambda *a, **kw: _FakeResponse(b"<html>nope</html>"))
        assert fetch_logo("https://cdn.example.com/logo.png") is None


def _report(**store):
    return {
        "store": {"id": "x", "name": "Harbour Books", "address": "12 Quay Road", **store},
        "topPriciestBooks": [
            {"name": "Kindred", "authorName": "Octavia Butler", "price": 11.0, "pages": 264},
        ],
        "topProlificAuthors": [{"name": "Octavia Butler", "bookCount": 2}],
    }


class TestSvg:

    def test_contains_sections_and_rows(self):
        svg = build_report_svg(_report(), today=date(2024, 3, 9))
        assert "Top 5 Priciest Books" in svg
        assert "Top 5 Prolific Authors" in svg
        assert "Report Generated: 2024-03-09" in svg
        assert "$11.00" in svg
        assert "<image" not in svg

    def test_escapes_text(self):
        svg = build_report_svg(_report(name="Books & <Co>"))
        assert "Books &amp; &lt;Co&gt;" in svg

    def test_empty_sections(self):
        report = _report()
        report["topPriciestBooks"] = []
        report["topProlificAuthors"] = []
        svg = build_report_svg(report)
        assert "No books available in inventory." in svg
        assert "No authors with available books in inventory." in svg

    def test_embeds_logo(self):
        svg = build_report_svg(_report(), logo_uri="data:image/png;base64,AAAA")
        assert 'href="data:image/png;base64,AAAA"' in svg


class TestRender:

    def test_render_converts_svg(self, monkeypatch):
        seen = {}

        def _fake_pdf(svg):
            seen["svg"] = svg
            return b"%PDF-1.4 fake"

        monkeypatch.setattr(report_service, "_svg_to_pdf", _fake_pdf)
        assert render_report_pdf(_report()) == b"%PDF-1.4 fake"
        assert "Harbour Books" in seen["svg"]

    def test_render_survives_logo_failure(self, monkeypatch):
        monkeypatch.setattr(report_service, "fetch_logo", lambda url: None)
        monkeypatch.setattr(report_service, "_svg_to_pdf", lambda svg: svg.encode())
        pdf = render_report_pdf(_report(logo="https://cdn.example.com/logo.png"))
        assert b"<image" not in pdf
