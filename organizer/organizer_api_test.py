"""Tests for the bookmark organizer HTTP endpoints."""

import pytest
from fastapi.testclient import TestClient

from organizer_api import app, get_services
from storage.bookmark_models import BOOKMARKS_BAR_ID


@pytest.fixture
def client(smart_services):
    app.dependency_overrides[get_services] = lambda: smart_services
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestClassifyEndpoint:
    def test_repository(self, client):
        response = client.post(
            "/api/classify",
            json={"url": "https://github.com/acme/widget", "title": "Widget Repo"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "category": {"type": "repository", "tech": "git", "confidence": 0.8},
            "folderName": "Dev - Repositories",
        }

    def test_no_match(self, client):
        response = client.post(
            "/api/classify", json={"url": "https://example.com", "title": "Home"}
        )

        assert response.json() == {"category": None, "folderName": None}

    def test_empty_url_is_rejected(self, client):
        response = client.post("/api/classify", json={"url": ""})
        assert response.status_code == 422


class TestBookmarkEvents:
    def test_created_event_organizes(self, client, smart_services):
        workspace = smart_services.directory.create("api", ["python"])
        bookmark = smart_services.store.create(
            BOOKMARKS_BAR_ID, "Flask tutorial", "https://example.com/flask"
        )

        response = client.post(
            f"/api/bookmarks/{bookmark.id}/events", params={"event": "created"}
        )

        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "organized"
        assert body["workspaceId"] == workspace.id
        assert smart_services.store.get(body["folderId"]).title == "Dev - Python"

    def test_missing_bookmark_reports_failure(self, client):
        response = client.post("/api/bookmarks/404/events")

        assert response.status_code == 200
        assert response.json()["status"] == "failed"


class TestWorkspaceEndpoints:
    @pytest.fixture
    def workspace(self, smart_services):
        workspace = smart_services.directory.create("api", ["python"])
        bookmark = smart_services.store.create(
            BOOKMARKS_BAR_ID, "Python python python", "https://example.com/py"
        )
        smart_services.organizer.handle_created(bookmark)
        return workspace

    def test_bookmarks(self, client, workspace):
        response = client.get(f"/api/workspaces/{workspace.id}/bookmarks")

        assert response.status_code == 200
        assert [a["url"] for a in response.json()] == ["https://example.com/py"]

    def test_suggestions(self, client, workspace):
        response = client.get(f"/api/workspaces/{workspace.id}/suggestions")

        suggestions = response.json()
        assert len(suggestions) == 1
        assert suggestions[0]["relevanceScore"] == 0.9

    def test_suggestions_with_tech_override(self, client, workspace):
        response = client.get(
            f"/api/workspaces/{workspace.id}/suggestions", params={"tech": "rust"}
        )
        assert response.json() == []

    def test_suggestions_tech_override_ignores_case(self, client, workspace):
        response = client.get(
            f"/api/workspaces/{workspace.id}/suggestions", params={"tech": "PYTHON"}
        )
        assert [s["url"] for s in response.json()] == ["https://example.com/py"]

    def test_suggestions_for_unknown_workspace(self, client):
        response = client.get("/api/workspaces/nope/suggestions")
        assert response.status_code == 404

    def test_export_then_import(self, client, workspace):
        exported = client.get(f"/api/workspaces/{workspace.id}/export").json()

        assert exported["workspaceId"] == workspace.id
        assert exported["referenceHash"]

        response = client.post("/api/workspaces/other/import", json=exported)

        assert response.status_code == 200
        assert response.json() == {
            "workspaceId": "other",
            "added": 1,
            "skipped": 0,
            "total": 1,
        }

    def test_malformed_import(self, client):
        response = client.post(
            "/api/workspaces/other/import", json={"bookmarks": [{"title": "no url"}]}
        )
        assert response.status_code == 422
