import pytest

from blind75_tutor.db import init_db
from blind75_tutor.seed import seed_all
from blind75_tutor.store import ProgressStore


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_tutor.db")
    return db_path


@pytest.fixture
def store(tmp_db):
    """Initialised store with the bundled catalog loaded."""
    init_db(tmp_db)
    store = ProgressStore(tmp_db)
    seed_all(store)
    return store
