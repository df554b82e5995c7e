import math

import pytest

from import_engine.csv_parser import (
    count_rows,
    iter_rows,
    missing_columns,
    normalize_header,
    read_batch,
)
from import_engine.importer import total_batches
from tests.factories import inventory_csv


def _write(tmp_path, content: bytes, name="inv.csv"):
    path = tmp_path / name
    path.write_bytes(content)
    return path


@pytest.mark.parametrize("raw,expected", [
    ("Store Name", "store_name"),
    ("  BOOK   name ", "book_name"),
    ("price", "price"),
    ("Author\tName", "author_name"),
])
def test_normalize_header(raw, expected):
    assert normalize_header(raw) == expected


def test_iter_rows_normalises_headers_and_strips_bom(tmp_path):
    content = "\ufeffStore Name, Book Name ,Pages\nA,B,10\n".encode("utf-8")
    rows = list(iter_rows(_write(tmp_path, content)))
    assert rows == [{"store_name": "A", "book_name": "B", "pages": "10"}]


def test_blank_lines_are_not_rows(tmp_path):
    content = b"store_name,pages\nA,1\n\n\nB,2\n"
    assert count_rows(_write(tmp_path, content)) == 2


def test_empty_file(tmp_path):
    path = _write(tmp_path, b"")
    assert count_rows(path) == 0
    assert read_batch(path, 0, 10) == []


def test_header_only(tmp_path):
    assert count_rows(_write(tmp_path, inventory_csv([]))) == 0


def test_missing_columns(tmp_path):
    path = _write(tmp_path, b"Store Name,Book Name\nA,B\n")
    assert missing_columns(path) == ["store_address", "pages", "author_name", "price"]


@pytest.mark.parametrize("n_rows,batch_size", [(1, 100), (5, 2), (10, 5), (7, 3), (250, 100)])
def test_batches_cover_every_row_once(tmp_path, n_rows, batch_size):
    rows = [(f"S{i}", "Addr", f"Book {i}", 10, "Auth", 1) for i in range(n_rows)]
    path = _write(tmp_path, inventory_csv(rows))

    batches = total_batches(count_rows(path), batch_size)
    assert batches == math.ceil(n_rows / batch_size)

    seen = []
    for idx in range(batches):
        batch = read_batch(path, idx * batch_size, batch_size)
        assert len(batch) <= batch_size
        seen.extend(r["book_name"] for r in batch)

    assert seen == [f"Book {i}" for i in range(n_rows)]


def test_read_batch_stops_at_window(tmp_path):
    # Bytes after the window are never decoded into rows
    content = inventory_csv([("A", "x", "B1", 1, "Au", 1), ("A", "x", "B2", 1, "Au", 1)])
    content += b"\x00broken,row,that,is,never,read\n" * 3
    path = _write(tmp_path, content)
    assert [r["book_name"] for r in read_batch(path, 0, 2)] == ["B1", "B2"]


def test_total_batches_zero_rows():
    assert total_batches(0, 100) == 0
