import pytest

from db import get_session, init_db
from import_engine.scratch import ScratchSpace
from tests.factories import bind_session


@pytest.fixture
def database(tmp_path):
    """Fresh SQLite database file per test."""
    url = f"sqlite:///{tmp_path / 'test.sqlite'}"
    init_db(url)
    return url


@pytest.fixture
def session(database):
    """Session used by the factories; commits on every create."""
    s = get_session()
    bind_session(s)
    yield s
    s.close()


@pytest.fixture
def scratch_dir(tmp_path):
    return tmp_path / "scratch"


@pytest.fixture
def scratch(scratch_dir):
    """Isolated scratch directory for the import engine."""
    return ScratchSpace(scratch_dir)


@pytest.fixture
def app(tmp_path, scratch_dir):
    from main import create_app

    app = create_app(db_url=f"sqlite:///{tmp_path / 'api.sqlite'}", scratch_dir=scratch_dir)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    """Return a Flask test client."""
    return app.test_client()
