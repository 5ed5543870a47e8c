"""Test configuration: a throwaway SQLite file and PDF directory per run."""
import os
import tempfile

_TMP = tempfile.mkdtemp(prefix="jewel-erp-tests-")
os.environ.setdefault("DB_URL", "sqlite:///" + os.path.join(_TMP, "test.db"))
os.environ.setdefault("PDF_DIR", os.path.join(_TMP, "generated"))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session  # noqa: E402

from jewel_erp import services  # noqa: E402
from jewel_erp.db import engine, reset_db  # noqa: E402
from jewel_erp.main import app  # noqa: E402


@pytest.fixture
def db():
    reset_db()
    with Session(engine) as s:
        services.seed_defaults(s)
    yield engine


@pytest.fixture
def session(db):
    with Session(db) as s:
        yield s


@pytest.fixture
def client(db):
    with TestClient(app) as c:
        yield c
