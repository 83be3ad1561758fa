"""Tests for terangabuild.web.routes.checklist - Checklist routes."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from terangabuild.web.dependencies import get_service
from terangabuild.web.routes import checklist

BASE = "/api/projects/demo-project-1/checklist"


@pytest.fixture
def app(service):
    test_app = FastAPI()
    test_app.include_router(checklist.router)
    test_app.dependency_overrides[get_service] = lambda: service
    return test_app


@pytest.fixture
def client(app):
    return TestClient(app)


class TestChecklistRoutes:
    def test_list_in_order(self, client):
        response = client.get(BASE)

        assert response.status_code == 200
        assert [i["order_index"] for i in response.json()] == list(range(1, 13))

    def test_toggle_returns_item_and_progress(self, client):
        response = client.post(f"{BASE}/demo-checklist-8/toggle", json={"actor_id": "demo-pro-1"})

        assert response.status_code == 200
        body = response.json()
        assert body["item"]["is_completed"] is True
        assert body["item"]["completed_by"] == "demo-pro-1"
        assert body["progress"] == 67

    def test_toggle_item_of_other_project(self, client):
        response = client.post(
            "/api/projects/demo-project-2/checklist/demo-checklist-8/toggle",
            json={"actor_id": "demo-pro-1"},
        )
        assert response.status_code == 404

    def test_delete_item_of_other_project(self, client):
        response = client.delete("/api/projects/demo-project-2/checklist/demo-checklist-12")

        assert response.status_code == 404
        assert len(client.get(BASE).json()) == 12
        assert client.post(f"{BASE}/demo-checklist-8/toggle", json={"actor_id": "demo-pro-1"}).json()["progress"] == 67

    def test_toggle_requires_actor(self, client):
        assert client.post(f"{BASE}/demo-checklist-8/toggle", json={}).status_code == 422

    def test_toggle_then_delete(self, client):
        client.post(f"{BASE}/demo-checklist-8/toggle", json={"actor_id": "demo-pro-1"})
        response = client.delete(f"{BASE}/demo-checklist-12")

        assert response.json() == {"success": True, "progress": 73}

    def test_delete_missing_item(self, client):
        assert client.delete(f"{BASE}/missing").status_code == 404

    def test_create_item(self, client):
        response = client.post(
            BASE,
            json={"title": "Clôture", "order_index": 13, "priority": "low", "dependencies": ["demo-checklist-12"]},
        )

        assert response.status_code == 201
        assert response.json()["project_id"] == "demo-project-1"
        assert len(client.get(BASE).json()) == 13

    def test_apply_template(self, client):
        response = client.post("/api/projects/demo-project-2/checklist/templates/immeuble")

        assert response.status_code == 201
        assert response.json()["count"] == 10

    def test_apply_unknown_template(self, client):
        assert client.post(f"{BASE}/templates/pagode").status_code == 404

    def test_apply_template_to_missing_project(self, client):
        assert client.post("/api/projects/missing/checklist/templates/villa").status_code == 404
