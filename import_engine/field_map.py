"""
import_engine.field_map - Expected CSV columns.

Header cells are normalised (see csv_parser.normalize_header) before
they are matched against these names.
"""

STORE_NAME    = "store_name"
STORE_ADDRESS = "store_address"
BOOK_NAME     = "book_name"
PAGES         = "pages"
AUTHOR_NAME   = "author_name"
PRICE         = "price"
LOGO          = "logo"

# Validation order: the first failing column is the one reported
EXPECTED_COLUMNS: tuple[str, ...] = (
    STORE_NAME, STORE_ADDRESS, BOOK_NAME, PAGES, AUTHOR_NAME, PRICE, LOGO,
)

OPTIONAL_COLUMNS = frozenset({LOGO})
REQUIRED_COLUMNS = tuple(c for c in EXPECTED_COLUMNS if c not in OPTIONAL_COLUMNS)
