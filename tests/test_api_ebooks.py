from fastapi.testclient import TestClient

from ebook_catalog.deps import get_repository
from ebook_catalog.domain.catalog.errors import UpstreamError
from ebook_catalog.main import app
from tests.conftest import PDF_BYTES, PNG_BYTES, make_record, stored_files

def _files(pdf=True, cover=False):
    files = {}
    if pdf:
        files["pdf"] = ("livre.pdf", PDF_BYTES, "application/pdf")
    if cover:
        files["cover"] = ("cover.png", PNG_BYTES, "image/png")
    return files

def _create(client, **data):
    fields = {"title": "Foo", "author": "Bar"}
    fields.update(data)
    return client.post("/api/ebooks", data=fields, files=_files(cover=True))

def test_list_envelope_shape(client, repo):
    for i in range(10):
        repo.insert(make_record(title=f"Livre {i}"))

    res = client.get("/api/ebooks", params={"page": 2, "pageSize": 4})
    assert res.status_code == 200
    body = res.json()
    assert set(body) == {"items", "total", "page", "pageSize", "pages", "hasPrev", "hasNext"}
    assert len(body["items"]) == 4
    assert (body["page"], body["pages"], body["total"]) == (2, 3, 10)
    assert body["hasPrev"] is True and body["hasNext"] is True

def test_list_clamps_garbage_parameters(client, repo):
    repo.insert(make_record())
    res = client.get("/api/ebooks", params={"page": "abc", "pageSize": "9999"})
    assert res.status_code == 200
    body = res.json()
    assert (body["page"], body["pageSize"]) == (1, 50)

def test_list_serves_last_page_for_huge_page_number(client, repo):
    for i in range(3):
        repo.insert(make_record(title=f"Livre {i}"))

    res = client.get("/api/ebooks", params={"page": "99999999999999999999", "pageSize": 2})
    assert res.status_code == 200
    body = res.json()
    assert (body["page"], body["pages"], len(body["items"])) == (2, 2, 1)

def test_list_accepts_legacy_parameter_names(client, repo):
    repo.insert(make_record(title="Foo", language="en", categories="fiction,classic"))
    repo.insert(make_record(title="Baz", language="fr", categories="fiction"))

    body = client.get("/api/ebooks", params={"lang": "en", "cat": "classic", "page_size": 1}).json()
    assert [e["title"] for e in body["items"]] == ["Foo"]
    assert body["pageSize"] == 1

def test_list_category_end_to_end(admin_client):
    assert _create(admin_client, categories="fiction,classic").status_code == 200

    hits = admin_client.get("/api/ebooks", params={"category": "fiction"}).json()
    assert [e["title"] for e in hits["items"]] == ["Foo"]
    misses = admin_client.get("/api/ebooks", params={"category": "nonfiction"}).json()
    assert misses["items"] == [] and misses["total"] == 0

def test_list_degrades_with_5xx_when_repository_is_down(client):
    class Down:
        def count(self, flt):
            raise UpstreamError("db down")

        def fetch(self, flt, offset, limit):
            raise UpstreamError("db down")

    app.dependency_overrides[get_repository] = lambda: Down()
    res = client.get("/api/ebooks", params={"pageSize": 5})
    assert res.status_code == 503
    assert res.json() == {
        "items": [], "total": 0, "page": 1, "pageSize": 5,
        "pages": 1, "hasPrev": False, "hasNext": False,
    }

def test_get_one_and_not_found(client, repo):
    eid = repo.insert(make_record(title="Foo"))
    assert client.get(f"/api/ebooks/{eid}").json()["title"] == "Foo"

    res = client.get("/api/ebooks/9999")
    assert res.status_code == 404
    assert res.json()["error"] == "not_found"

def test_create_returns_id_and_serves_blobs(admin_client, blob_root):
    res = _create(admin_client, price_cents="250", language="en")
    assert res.status_code == 200
    body = res.json()
    assert body["ok"] is True

    ebook = admin_client.get(f"/api/ebooks/{body['id']}").json()
    assert ebook["price_cents"] == 250
    assert ebook["language"] == "en"
    assert ebook["pdf_path"].startswith("/uploads/pdfs/")
    assert len(stored_files(blob_root)) == 2

def test_create_without_pdf_is_validation_error(admin_client, blob_root):
    res = admin_client.post(
        "/api/ebooks",
        data={"title": "Foo", "author": "Bar"},
        files=_files(pdf=False, cover=True),
    )
    assert res.status_code == 400
    assert res.json() == {"ok": False, "error": "validation_error", "detail": res.json()["detail"]}
    assert stored_files(blob_root) == []
    assert admin_client.get("/api/ebooks").json()["total"] == 0

def test_create_with_oversized_price_is_tagged(admin_client, blob_root):
    res = _create(admin_client, price_cents="99999999999999999999")
    assert res.status_code == 400
    assert res.json()["error"] == "validation_error"
    assert stored_files(blob_root) == []

def test_create_requires_admin(client, blob_root):
    res = _create(client)
    assert res.status_code == 401
    assert res.json()["error"] == "unauthorized"
    assert stored_files(blob_root) == []

def test_partial_update_over_http(admin_client):
    eid = _create(admin_client).json()["id"]
    res = admin_client.put(f"/api/ebooks/{eid}", data={"price_cents": "500"})
    assert res.json() == {"ok": True, "updated": 1}

    ebook = admin_client.get(f"/api/ebooks/{eid}").json()
    assert ebook["price_cents"] == 500
    assert ebook["title"] == "Foo"

def test_update_unknown_id(admin_client):
    res = admin_client.put("/api/ebooks/9999", data={"title": "x"})
    assert res.status_code == 404

def test_delete_flow(admin_client, blob_root):
    eid = _create(admin_client).json()["id"]

    res = admin_client.delete(f"/api/ebooks/{eid}")
    assert res.json() == {"ok": True, "deleted": 1}
    assert stored_files(blob_root) == []
    assert admin_client.get(f"/api/ebooks/{eid}").status_code == 404

    again = admin_client.delete(f"/api/ebooks/{eid}")
    assert again.status_code == 404
    assert again.json()["error"] == "not_found"

def test_unauthenticated_delete_keeps_record(client, repo):
    eid = repo.insert(make_record(title="Foo"))

    res = client.delete(f"/api/ebooks/{eid}")
    assert res.status_code == 401
    assert client.get(f"/api/ebooks/{eid}").status_code == 200

def test_malformed_id_is_tagged_validation_error(client):
    for path in ("/api/ebooks/abc", "/api/ebooks/0", "/api/ebooks/99999999999999999999"):
        res = client.get(path)
        assert res.status_code == 400
        body = res.json()
        assert body["ok"] is False
        assert body["error"] == "validation_error"
        assert "ebook_id" in body["detail"]

def test_unexpected_errors_are_tagged_upstream_error(client):
    class Broken:
        def get_by_id(self, ebook_id):
            raise RuntimeError("boom")

    app.dependency_overrides[get_repository] = lambda: Broken()
    with TestClient(app, raise_server_exceptions=False) as raw:
        res = raw.get("/api/ebooks/1")
    assert res.status_code == 500
    assert res.json() == {"ok": False, "error": "upstream_error", "detail": "Error interno"}
