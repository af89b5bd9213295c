from tests.http_client import SyncASGIClient
from toeic_admin.main import app


def _create_test(client: SyncASGIClient, title: str = "Mock Test 1") -> str:
    created = client.post("/admin/tests", json={"title": title, "description": "Reading part"})
    assert created.status_code == 200
    body = created.json()
    assert body["status"] == "draft"
    assert body["sections"] == []
    return body["testId"]


def _section_ids(body: dict) -> list:
    return [section["id"] for section in body["sections"]]


def test_create_list_and_delete_test_contract():
    client = SyncASGIClient(app)
    test_id = _create_test(client)
    assert test_id.startswith("test_")

    listed = client.get("/admin/tests", params={"refresh": "true"})
    assert listed.status_code == 200
    assert test_id in [t["testId"] for t in listed.json()["tests"]]

    deleted = client.delete(f"/admin/tests/{test_id}")
    assert deleted.status_code == 200
    assert deleted.json() == {"ok": True, "testId": test_id}

    assert client.get(f"/admin/tests/{test_id}").status_code == 404
    assert client.delete(f"/admin/tests/{test_id}").status_code == 404


def test_create_test_rejects_blank_title():
    client = SyncASGIClient(app)
    resp = client.post("/admin/tests", json={"title": "   "})

    assert resp.status_code == 422


def test_bulk_import_appends_sections_in_order():
    client = SyncASGIClient(app)
    test_id = _create_test(client)

    first = client.post(f"/admin/tests/{test_id}/bulk-import", json={"text": "1. One A. a *B. b\n2. Two A. c"})
    assert first.status_code == 200
    assert first.json()["added"] == 2

    second = client.post(f"/admin/tests/{test_id}/bulk-import", json={"text": "3. Three *A. d B. e"})
    body = second.json()["test"]
    assert second.json()["added"] == 1
    assert body["questions"] == 3
    assert [s["title"] for s in body["sections"]] == ["One", "Two", "Three"]
    assert [s["order"] for s in body["sections"]] == [1, 2, 3]

    section_ids = _section_ids(body)
    assert len(set(section_ids)) == 3
    assert section_ids == sorted(section_ids)


def test_bulk_import_errors():
    client = SyncASGIClient(app)
    test_id = _create_test(client)

    assert client.post(f"/admin/tests/{test_id}/bulk-import", json={"text": " \n"}).status_code == 422
    assert client.post("/admin/tests/test_missing/bulk-import", json={"text": "Q A. a"}).status_code == 404


def test_drop_section_reorders_locally():
    client = SyncASGIClient(app)
    test_id = _create_test(client)
    imported = client.post(f"/admin/tests/{test_id}/bulk-import", json={"text": "A1 A. a\nB1 A. b\nC1 A. c\nD1 A. d"})
    a, b, c, d = _section_ids(imported.json()["test"])

    moved = client.drop(f"/admin/tests/{test_id}/sections/drop", kind="section", item_id=a, target_id=c)
    assert moved.status_code == 200
    body = moved.json()
    assert body["applied"] is True
    assert body["message"] == "Section order updated"
    assert [item["id"] for item in body["items"]] == [b, a, c, d]
    assert [item["order"] for item in body["items"]] == [1, 2, 3, 4]

    to_end = client.drop(f"/admin/tests/{test_id}/sections/drop", kind="section", item_id=b)
    assert [item["id"] for item in to_end.json()["items"]] == [a, c, d, b]

    stored = client.get(f"/admin/tests/{test_id}").json()
    assert _section_ids(stored) == [a, c, d, b]


def test_drop_section_ignored_drops():
    client = SyncASGIClient(app)
    test_id = _create_test(client)
    imported = client.post(f"/admin/tests/{test_id}/bulk-import", json={"text": "A1 A. a\nB1 A. b"})
    a, b = _section_ids(imported.json()["test"])

    wrong_kind = client.drop(f"/admin/tests/{test_id}/sections/drop", kind="lesson", item_id=a, target_id=b)
    assert wrong_kind.json()["applied"] is False
    assert wrong_kind.json()["reason"] == "kind_mismatch"

    unknown = client.drop(f"/admin/tests/{test_id}/sections/drop", kind="section", item_id=999, target_id=b)
    assert unknown.json()["reason"] == "not_found"

    garbage = client.post(f"/admin/tests/{test_id}/sections/drop", json={"payload": "not json"})
    assert garbage.json()["reason"] == "invalid_payload"
    assert [item["id"] for item in garbage.json()["items"]] == [a, b]

    missing = client.drop("/admin/tests/test_missing/sections/drop", kind="section", item_id=a)
    assert missing.status_code == 404


def test_remove_section_renumbers_remaining():
    client = SyncASGIClient(app)
    test_id = _create_test(client)
    imported = client.post(f"/admin/tests/{test_id}/bulk-import", json={"text": "A1 A. a\nB1 A. b\nC1 A. c"})
    a, b, c = _section_ids(imported.json()["test"])

    resp = client.delete(f"/admin/tests/{test_id}/sections/{b}")
    assert resp.status_code == 200
    body = resp.json()
    assert _section_ids(body) == [a, c]
    assert [s["order"] for s in body["sections"]] == [1, 2]
    assert body["questions"] == 2

    assert client.delete(f"/admin/tests/test_missing/sections/{a}").status_code == 404
