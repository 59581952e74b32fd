import logging
from pathlib import Path

import pytest
from sqlalchemy.exc import OperationalError

from app.candidates import service as candidate_service
from app.core.config import MAX_FILE_SIZE
from app.documents import service as document_service
from app.main import create_app

from factories import candidate_payload

PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def create(client, **overrides):
    response = client.post("/api/candidates", json=candidate_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()["data"]


def upload(client, candidate_id, name="cv.pdf", content=b"%PDF-1.4 test", mime_type=PDF, **data):
    return client.post(
        f"/api/candidates/{candidate_id}/documents",
        files={"file": (name, content, mime_type)},
        data=data,
    )


def stored_files(test_settings):
    root = Path(test_settings.UPLOAD_DIR)
    return sorted(p.name for p in root.iterdir()) if root.exists() else []


class TestHealth:
    def test_health_check(self, client):
        response = client.get("/")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "LTI ATS server is running"
        assert body["version"] == "1.0.0"
        assert "timestamp" in body

    def test_correlation_id_is_echoed(self, client):
        response = client.get("/", headers={"X-Correlation-ID": "abc-123"})

        assert response.headers["X-Correlation-ID"] == "abc-123"

    def test_logging_follows_the_app_settings(self, test_settings, database, storage):
        quiet = test_settings.model_copy(update={"LOG_LEVEL": "WARNING"})

        create_app(quiet, database=database, storage=storage)

        assert logging.getLogger().level == logging.WARNING

    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": {"code": "NOT_FOUND", "message": "Route GET /api/nothing-here not found"},
        }


class TestCandidatesApi:
    def test_create_returns_camel_case_aggregate(self, client):
        response = client.post(
            "/api/candidates",
            json=candidate_payload(
                education=[{"institution": "UCM", "fieldOfStudy": "CS", "gpa": 3.6}],
                experience=[{"company": "Acme", "position": "Dev", "isCurrent": True, "salary": 40000}],
            ),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Candidate created successfully"
        data = body["data"]
        assert data["firstName"] == "Ana"
        assert data["status"] == "active"
        assert data["education"][0]["fieldOfStudy"] == "CS"
        assert data["education"][0]["gpa"] == 3.6
        assert data["experience"][0]["isCurrent"] is True
        assert data["experience"][0]["salary"] == 40000
        assert data["documents"] == []

    def test_create_invalid_payload(self, client):
        response = client.post("/api/candidates", json={"firstName": "", "email": "nope"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        fields = {d["field"] for d in error["details"]}
        assert {"firstName", "lastName", "email"} <= fields

    def test_create_malformed_json(self, client):
        response = client.post(
            "/api/candidates",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_create_duplicate_email(self, client):
        create(client)

        response = client.post("/api/candidates", json=candidate_payload(email="ANA.GARCIA@example.com"))

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "DUPLICATE_ERROR"
        assert error["details"] == {"field": "email"}

    def test_get_candidate(self, client):
        created = create(client)

        response = client.get(f"/api/candidates/{created['id']}")

        assert response.status_code == 200
        assert response.json()["data"]["email"] == "ana.garcia@example.com"

    def test_get_unknown_candidate(self, client):
        response = client.get("/api/candidates/999")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_non_integer_id_is_a_validation_error(self, client):
        response = client.get("/api/candidates/abc")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_list_with_pagination(self, client):
        for i in range(1, 13):
            create(client, lastName=f"Cand{i:02d}", email=f"cand{i:02d}@example.com")

        response = client.get(
            "/api/candidates",
            params={"page": 2, "limit": 5, "sortBy": "lastName", "sortOrder": "asc"},
        )

        assert response.status_code == 200
        body = response.json()
        assert [c["lastName"] for c in body["data"]] == ["Cand06", "Cand07", "Cand08", "Cand09", "Cand10"]
        assert body["pagination"] == {"page": 2, "limit": 5, "total": 12, "totalPages": 3}

    def test_list_empty_still_has_data_array(self, client):
        body = client.get("/api/candidates").json()

        assert body["data"] == []
        assert body["pagination"]["total"] == 0

    def test_list_clamps_limit(self, client):
        body = client.get("/api/candidates", params={"limit": 1000}).json()

        assert body["pagination"]["limit"] == 100

    def test_list_rejects_unknown_sort_field(self, client):
        response = client.get("/api/candidates", params={"sortBy": "phone"})

        assert response.status_code == 400

    def test_update_candidate(self, client):
        created = create(client)

        response = client.put(f"/api/candidates/{created['id']}", json={"status": "in_review"})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Candidate updated successfully"
        assert body["data"]["status"] == "in_review"
        assert body["data"]["firstName"] == "Ana"

    def test_update_with_empty_body(self, client):
        created = create(client)

        response = client.put(f"/api/candidates/{created['id']}", json={})

        assert response.status_code == 200
        assert response.json()["data"]["lastName"] == "García"

    def test_update_to_taken_email(self, client):
        create(client)
        other = create(client, email="luis@example.com")

        response = client.put(f"/api/candidates/{other['id']}", json={"email": "ana.garcia@example.com"})

        assert response.status_code == 409

    def test_update_unknown_candidate(self, client):
        assert client.put("/api/candidates/999", json={"notes": "x"}).status_code == 404

    def test_delete_candidate_removes_documents(self, client, test_settings):
        created = create(client)
        assert upload(client, created["id"]).status_code == 201
        assert len(stored_files(test_settings)) == 1

        response = client.delete(f"/api/candidates/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Candidate deleted successfully"}
        assert stored_files(test_settings) == []
        assert client.get(f"/api/candidates/{created['id']}").status_code == 404

    def test_delete_unknown_candidate(self, client):
        assert client.delete("/api/candidates/999").status_code == 404


class TestDocumentsApi:
    def test_upload_pdf(self, client, test_settings):
        created = create(client)

        response = upload(client, created["id"], name="My CV.pdf")

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Document uploaded successfully"
        data = body["data"]
        assert data["originalName"] == "My CV.pdf"
        assert data["fileType"] == "pdf"
        assert data["mimeType"] == PDF
        assert data["documentType"] == "cv"
        assert data["fileSize"] == len(b"%PDF-1.4 test")
        assert Path(data["filePath"]).read_bytes() == b"%PDF-1.4 test"
        assert stored_files(test_settings) == [data["fileName"]]

    def test_upload_docx_with_document_type(self, client):
        created = create(client)

        response = upload(
            client, created["id"], name="letter.docx", content=b"PK", mime_type=DOCX, documentType="cover_letter"
        )

        assert response.status_code == 201
        assert response.json()["data"]["documentType"] == "cover_letter"
        assert response.json()["data"]["fileType"] == "docx"

    def test_png_is_rejected_before_storage(self, client, test_settings):
        created = create(client)

        response = upload(client, created["id"], name="photo.png", content=b"\x89PNG", mime_type="image/png")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "FILE_UPLOAD_ERROR"
        assert stored_files(test_settings) == []
        assert client.get(f"/api/candidates/{created['id']}/documents").json()["data"] == []

    def test_oversized_file_is_rejected(self, client, test_settings):
        created = create(client)

        response = upload(client, created["id"], content=b"0" * (6 * 1024 * 1024))

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "File too large. Maximum size is 5MB."
        assert stored_files(test_settings) == []

    def test_file_of_exactly_the_limit_is_accepted(self, client):
        created = create(client)

        response = upload(client, created["id"], content=b"0" * MAX_FILE_SIZE)

        assert response.status_code == 201

    def test_missing_file(self, client):
        created = create(client)

        response = client.post(f"/api/candidates/{created['id']}/documents", data={"documentType": "cv"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "FILE_UPLOAD_ERROR"

    def test_long_file_name_is_shortened_for_storage(self, client, test_settings):
        created = create(client)
        name = "a" * 240 + ".pdf"

        response = upload(client, created["id"], name=name)

        assert response.status_code == 201, response.text
        data = response.json()["data"]
        assert data["originalName"] == name
        assert len(data["fileName"].encode("utf-8")) <= 255
        assert data["fileName"].endswith("a.pdf")
        assert stored_files(test_settings) == [data["fileName"]]

    def test_unexpected_failure_after_storing_removes_the_file(self, client, test_settings, monkeypatch):
        created = create(client)

        def broken(*args, **kwargs):
            raise RuntimeError("metadata write failed")

        monkeypatch.setattr(document_service, "upload_document", broken)

        response = upload(client, created["id"])

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "INTERNAL_ERROR"
        assert stored_files(test_settings) == []

    def test_upload_for_unknown_candidate_leaves_no_file(self, client, test_settings):
        response = upload(client, 999)

        assert response.status_code == 404
        assert stored_files(test_settings) == []

    def test_list_documents_newest_first(self, client):
        created = create(client)
        first = upload(client, created["id"], name="a.pdf").json()["data"]
        second = upload(client, created["id"], name="b.pdf").json()["data"]

        body = client.get(f"/api/candidates/{created['id']}/documents").json()

        assert [d["id"] for d in body["data"]] == [second["id"], first["id"]]

    def test_list_shows_latest_cv(self, client):
        created = create(client)
        upload(client, created["id"], name="old.pdf")
        latest = upload(client, created["id"], name="new.pdf").json()["data"]

        item = client.get("/api/candidates").json()["data"][0]

        assert [d["id"] for d in item["documents"]] == [latest["id"]]

    def test_delete_document(self, client, test_settings):
        created = create(client)
        document = upload(client, created["id"]).json()["data"]

        response = client.delete(f"/api/candidates/{created['id']}/documents/{document['id']}")

        assert response.status_code == 200
        assert response.json()["message"] == "Document deleted successfully"
        assert stored_files(test_settings) == []

    def test_delete_document_of_another_candidate(self, client, test_settings):
        owner = create(client)
        other = create(client, email="luis@example.com")
        document = upload(client, owner["id"]).json()["data"]

        response = client.delete(f"/api/candidates/{other['id']}/documents/{document['id']}")

        assert response.status_code == 404
        assert stored_files(test_settings) == [document["fileName"]]


class TestErrorMapping:
    def test_database_failure_does_not_leak_cause(self, client, monkeypatch):
        def broken(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("connection refused on 10.0.0.5"))

        monkeypatch.setattr(candidate_service, "_email_taken", broken)

        response = client.post("/api/candidates", json=candidate_payload())

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "DATABASE_ERROR"
        assert "10.0.0.5" not in response.text

    def test_unexpected_error_is_internal(self, client, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("secret internals")

        monkeypatch.setattr(candidate_service, "get_candidate", broken)

        response = client.get("/api/candidates/1", headers={"X-Correlation-ID": "req-42"})

        assert response.status_code == 500
        assert response.headers["X-Correlation-ID"] == "req-42"
        assert response.json() == {
            "success": False,
            "error": {"code": "INTERNAL_ERROR", "message": "Internal server error"},
        }

    @pytest.mark.parametrize("path", ["/api/candidates/999", "/api/candidates/999/documents"])
    def test_not_found_is_not_masked(self, client, path):
        response = client.get(path)

        assert response.status_code == 404
        assert response.json()["success"] is False
