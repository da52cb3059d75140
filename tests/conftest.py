import os
import tempfile

# antes de importar la app: nada de data.sqlite ni uploads/ en el repo
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DEV_AUTO_CREATE", "0")
os.environ.setdefault("UPLOADS_DIR", tempfile.mkdtemp(prefix="ebook-uploads-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ebook_catalog import security
from ebook_catalog.db import Base, get_db, install_sqlite_functions
from ebook_catalog.deps import get_blob_store
from ebook_catalog.domain.catalog.repository import CatalogRepository
from ebook_catalog.main import app
from ebook_catalog.models import ebook  # noqa: F401
from ebook_catalog.services.blob_store import LocalBlobStore

PDF_BYTES = b"%PDF-1.4\n% test\n"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16

@pytest.fixture
def engine():
    eng = install_sqlite_functions(create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    ))
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()

@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture
def db(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()

@pytest.fixture
def repo(db):
    return CatalogRepository(db)

@pytest.fixture
def blob_root(tmp_path):
    root = tmp_path / "uploads"
    root.mkdir()
    return root

@pytest.fixture
def blobs(blob_root):
    return LocalBlobStore(blob_root)

def stored_files(root):
    return sorted(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())

def make_record(**overrides):
    data = {
        "title": "Sans titre",
        "author": "Anonyme",
        "pdf_path": "/uploads/pdfs/0-demo.pdf",
    }
    data.update(overrides)
    return data

@pytest.fixture
def client(session_factory, blobs):
    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_blob_store] = lambda: blobs
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

@pytest.fixture
def admin_client(client):
    res = client.post(
        "/api/login",
        json={"email": security.ADMIN_EMAIL, "password": security.ADMIN_PASSWORD},
    )
    assert res.status_code == 200
    return client
