from fastapi.testclient import TestClient

from toeic_admin.main import app


def test_question_bank_import_export_contract():
    client = TestClient(app)
    questions = [
        {"id": 1, "kind": "mcq", "title": "Choose the verb", "choices": [{"id": 2, "text": "go", "isCorrect": True}]},
        {"id": 3, "kind": "mcq", "title": "Choose the noun", "choices": []},
    ]

    imported = client.post("/admin/question-bank/import", json={"questions": questions})
    assert imported.status_code == 200
    assert imported.json() == {"imported": 2, "count": 2}

    appended = client.post(
        "/admin/question-bank/import",
        json={"questions": [{"id": 4, "title": "Extra"}], "replace": False},
    )
    assert appended.json() == {"imported": 1, "count": 3}

    exported = client.get("/admin/question-bank/export")
    assert exported.status_code == 200
    body = exported.json()
    assert body["count"] == 3
    assert body["questions"][0] == questions[0]
    assert [q["id"] for q in body["questions"]] == [1, 3, 4]


def test_question_bank_import_rejects_non_objects():
    client = TestClient(app)
    resp = client.post("/admin/question-bank/import", json={"questions": ["not an object"]})

    assert resp.status_code == 422
