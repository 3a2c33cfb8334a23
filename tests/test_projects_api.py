import pathlib
import sys

import pytest
from fastapi.testclient import TestClient

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from hackeride.api import app  # noqa: E402
from hackeride.database import DEFAULT_PROJECT_NAME  # noqa: E402


@pytest.fixture(scope="module")
def client():
    return TestClient(app)


@pytest.fixture
def project(client):
    response = client.post(
        "/api/projects",
        json={"name": "Scratch", "language": "python", "description": "pruebas"},
    )
    assert response.status_code == 201
    return response.json()


def test_default_workspace_is_seeded(client):
    response = client.get("/api/projects")
    assert response.status_code == 200

    workspace = next(p for p in response.json() if p["name"] == DEFAULT_PROJECT_NAME)
    assert workspace["language"] == "javascript"
    assert workspace["description"] == "Polyglot development environment"

    files = client.get(f"/api/projects/{workspace['id']}/files").json()
    assert [f["name"] for f in files] == ["index.js", "main.py", "Main.java"]
    assert "Hello from HackerIDE" in files[0]["content"]


def test_create_project_returns_camel_case_record(project):
    assert project["name"] == "Scratch"
    assert project["language"] == "python"
    assert project["description"] == "pruebas"
    assert {"id", "createdAt", "updatedAt"} <= set(project)


def test_get_project(client, project):
    response = client.get(f"/api/projects/{project['id']}")
    assert response.status_code == 200
    assert response.json()["id"] == project["id"]


def test_missing_project_returns_404(client):
    response = client.get("/api/projects/999999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Project not found"


def test_invalid_project_body_returns_400(client):
    response = client.post("/api/projects", json={"name": "Sin lenguaje"})
    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Invalid request data"
    assert body["errors"]


def test_patch_project_updates_only_sent_fields(client, project):
    response = client.patch(f"/api/projects/{project['id']}", json={"name": "Renamed", "language": None})
    assert response.status_code == 200
    updated = response.json()
    assert updated["name"] == "Renamed"
    assert updated["language"] == "python"
    assert updated["description"] == "pruebas"
    assert updated["updatedAt"] >= project["updatedAt"]

    assert client.patch("/api/projects/999999", json={"name": "x"}).status_code == 404


def test_file_lifecycle(client, project):
    created = client.post(
        f"/api/projects/{project['id']}/files",
        json={"name": "util.py", "path": "src/util.py", "language": "python"},
    )
    assert created.status_code == 201
    record = created.json()
    assert record["projectId"] == project["id"]
    assert record["content"] == ""
    assert record["isDirectory"] is False

    updated = client.put(f"/api/files/{record['id']}/content", json={"content": "print('hola')\n"})
    assert updated.status_code == 200
    assert updated.json()["content"] == "print('hola')\n"

    fetched = client.get(f"/api/files/{record['id']}")
    assert fetched.json()["content"] == "print('hola')\n"

    deleted = client.delete(f"/api/files/{record['id']}")
    assert deleted.status_code == 200
    assert deleted.json() == {"message": "File deleted successfully"}
    assert client.get(f"/api/files/{record['id']}").status_code == 404
    assert client.delete(f"/api/files/{record['id']}").status_code == 404


def test_file_content_must_be_string(client, project):
    record = client.post(
        f"/api/projects/{project['id']}/files",
        json={"name": "a.txt", "path": "a.txt", "content": "a"},
    ).json()

    response = client.put(f"/api/files/{record['id']}/content", json={"content": 42})
    assert response.status_code == 400
    assert response.json()["detail"] == "Content must be a string"

    missing = client.put("/api/files/999999/content", json={"content": "x"})
    assert missing.status_code == 404


def test_create_file_in_missing_project_returns_404(client):
    response = client.post("/api/projects/999999/files", json={"name": "x.js", "path": "x.js"})
    assert response.status_code == 404


def test_list_files_of_unknown_project_is_empty(client):
    response = client.get("/api/projects/999999/files")
    assert response.status_code == 200
    assert response.json() == []


def test_delete_project_removes_its_files(client, project):
    record = client.post(
        f"/api/projects/{project['id']}/files",
        json={"name": "gone.py", "path": "gone.py"},
    ).json()

    response = client.delete(f"/api/projects/{project['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Project deleted successfully"}

    assert client.get(f"/api/projects/{project['id']}").status_code == 404
    assert client.get(f"/api/files/{record['id']}").status_code == 404
    assert client.delete(f"/api/projects/{project['id']}").status_code == 404


@pytest.mark.parametrize("body", ["x", [1], {"text": "x"}, None])
def test_file_content_rejects_non_object_bodies(client, project, body):
    record = client.post(
        f"/api/projects/{project['id']}/files",
        json={"name": "b.txt", "path": "b.txt", "content": "b"},
    ).json()

    response = client.put(f"/api/files/{record['id']}/content", json=body)
    assert response.status_code == 400
    assert response.json()["detail"] == "Content must be a string"
    assert client.get(f"/api/files/{record['id']}").json()["content"] == "b"
