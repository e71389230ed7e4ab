"""Root conftest: test environment, structlog routed through stdlib logging, and a scratch database."""

from pathlib import Path

import pytest
import structlog
from dotenv import load_dotenv

from shared.db.connection import Database
from shared.logging import shared_processors

load_dotenv(Path(__file__).resolve().parent.parent / ".env.tests")

# Same processor chain as production, so caplog sees the events handlers would.
structlog.configure(
    processors=shared_processors(),
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=False,
)


@pytest.fixture(autouse=True)
def _clear_log_context():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def db(tmp_path):
    """Connected SQLite database with the schema applied, closed after the test."""
    database = Database(tmp_path / "test.db")
    database.connect()
    yield database
    database.close()
