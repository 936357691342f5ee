"""Tests for categories API endpoints."""

import pytest

from app.models.category import Category
from conftest import OTHER_USER_ID, USER_ID


class TestCategoriesAPI:
    """Test categories CRUD endpoints."""

    def test_list_categories(self, client, db_session, sample_category):
        """Should return only the user's categories."""
        db_session.add(Category(user_id=OTHER_USER_ID, name="Theirs"))
        db_session.commit()

        response = client.get("/api/v1/categories")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["name"] == "Household"

    def test_create_category(self, client):
        """Should create a new category."""
        response = client.post("/api/v1/categories", json={
            "name": "Travel",
            "color": "#ff0000",
            "icon": "plane"
        })
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Travel"
        assert data["color"] == "#ff0000"

    def test_create_subcategory(self, client, sample_category):
        """Should create a subcategory and nest it in the tree."""
        response = client.post("/api/v1/categories", json={
            "name": "Garden",
            "parent_id": sample_category.id
        })
        assert response.status_code == 201
        assert response.json()["parent_id"] == sample_category.id

        tree = client.get("/api/v1/categories").json()["items"]
        assert len(tree) == 1
        assert tree[0]["children"][0]["name"] == "Garden"

    def test_invalid_color(self, client):
        response = client.post("/api/v1/categories", json={"name": "Bad", "color": "red"})
        assert response.status_code == 422

    def test_update_category(self, client, sample_category):
        response = client.patch(f"/api/v1/categories/{sample_category.id}", json={"name": "Home"})
        assert response.status_code == 200
        assert response.json()["name"] == "Home"

    def test_category_of_other_user(self, client, sample_category):
        response = client.get(
            f"/api/v1/categories/{sample_category.id}",
            headers={"X-User-Id": OTHER_USER_ID}
        )
        assert response.status_code == 404

    def test_delete_category_keeps_tasks(self, client, sample_task, sample_category):
        response = client.delete(f"/api/v1/categories/{sample_category.id}")
        assert response.status_code == 204

        task = client.get(f"/api/v1/tasks/{sample_task.id}").json()
        assert task["category_id"] is None

    def test_usage_counts(self, client, sample_category, sample_task, recurring_task, recurring_expense):
        data = client.get(f"/api/v1/categories/{sample_category.id}").json()
        assert data["user_id"] == USER_ID
        assert data["task_count"] == 2
        assert data["expense_count"] == 1

        tree = client.get("/api/v1/categories").json()["items"]
        assert tree[0]["task_count"] == 2

    def test_name_and_color_are_normalized(self, client):
        response = client.post("/api/v1/categories", json={"name": "  Travel ", "color": "#FF00AA"})
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Travel"
        assert data["color"] == "#ff00aa"
        assert data["task_count"] == 0

    def test_blank_name(self, client):
        response = client.post("/api/v1/categories", json={"name": "   "})
        assert response.status_code == 422
