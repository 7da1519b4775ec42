import pytest
from fastapi.testclient import TestClient


@pytest.mark.integration
class TestContentTypeEndpoints:

    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_list_content_types(self, client: TestClient):
        response = client.get("/api/v1/content-types/")

        assert response.status_code == 200
        slugs = [item["slug"] for item in response.json()]
        assert set(slugs) == {"blog", "categories", "faqs", "products", "team", "vendors"}
        assert "X-Request-ID" in response.headers

    def test_filter_by_kind(self, client: TestClient):
        response = client.get("/api/v1/content-types/", params={"kind": "taxonomy"})

        assert [item["slug"] for item in response.json()] == ["categories"]

    def test_get_content_type_with_form(self, client: TestClient):
        response = client.get("/api/v1/content-types/faqs/")

        assert response.status_code == 200
        data = response.json()
        assert data["display_name"] == "FAQ"
        assert data["archive_path"] == "/help/faqs"
        assert data["single_pattern"] is None
        assert [item["name"] for item in data["fields"]] == ["question", "answer", "category", "display_order"]
        form = {spec["name"]: spec for spec in data["form"]}
        assert form["category"]["include_blank"] == "Select Category"
        assert form["display_order"]["value"] == 0

    def test_unknown_content_type(self, client: TestClient):
        response = client.get("/api/v1/content-types/recipes/")

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["message"] == "Content type 'recipes' not found"
        assert error["details"] == {"content_type": "recipes"}


@pytest.mark.integration
class TestEntryEndpoints:

    def test_create_and_get_entry(self, client: TestClient):
        response = client.post("/api/v1/content-types/faqs/entries/", json={
            "fields": {"question": "Can I pay by invoice?", "answer": "Yes.", "category": "Billing"},
        })

        assert response.status_code == 201
        created = response.json()
        assert created["slug"] == "can-i-pay-by-invoice"
        assert created["fields"]["display_order"] == 0
        assert created["display"]["category"] == "Billing"
        assert created["url"] is None

        fetched = client.get(f"/api/v1/content-types/faqs/entries/{created['id']}/")
        assert fetched.status_code == 200
        assert fetched.json()["fields"]["question"] == "Can I pay by invoice?"

    def test_validation_errors_are_field_scoped(self, client: TestClient):
        response = client.post("/api/v1/content-types/products/entries/", json={
            "fields": {"name": "Desk", "sku": "DESK-1", "price": "cheap", "vendor_ids": ["3", "7", ""]},
        })

        assert response.status_code == 422
        assert response.json()["error"]["details"]["errors"] == {"price": "Price must be a number"}

    def test_slug_collision_gets_suffix(self, client: TestClient):
        payload = {"fields": {"title": "Hello World", "content": "Body"}}

        first = client.post("/api/v1/content-types/blog/entries/", json=payload).json()
        second = client.post("/api/v1/content-types/blog/entries/", json=payload).json()

        assert first["slug"] == "hello-world"
        assert second["slug"] == "hello-world-1"
        assert second["url"] == "/blog/hello-world-1"

    def test_list_entries(self, client: TestClient):
        for question in ("One?", "Two?", "Three?"):
            client.post("/api/v1/content-types/faqs/entries/", json={"fields": {"question": question}})

        response = client.get("/api/v1/content-types/faqs/entries/", params={"limit": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert len(data["items"]) == 2

    def test_update_publish_and_delete(self, client: TestClient):
        created = client.post("/api/v1/content-types/faqs/entries/", json={"fields": {"question": "Draft?"}}).json()
        entry_url = f"/api/v1/content-types/faqs/entries/{created['id']}/"

        refused = client.post(f"{entry_url}publish/")
        assert refused.status_code == 422
        assert "answer" in refused.json()["error"]["details"]["errors"]

        updated = client.patch(entry_url, json={"fields": {"answer": "Now answered."}})
        assert updated.status_code == 200
        assert updated.json()["fields"]["answer"] == "Now answered."

        published = client.post(f"{entry_url}publish/")
        assert published.status_code == 200
        assert published.json()["status"] == "published"

        archived = client.post(f"{entry_url}archive/")
        assert archived.json()["status"] == "archived"

        assert client.delete(entry_url).status_code == 204
        assert client.get(entry_url).status_code == 404

    def test_edit_form_is_prefilled(self, client: TestClient):
        vendor = client.post("/api/v1/content-types/vendors/entries/", json={"fields": {"title": "Acme"}}).json()
        product = client.post("/api/v1/content-types/products/entries/", json={
            "fields": {"name": "Desk", "sku": "DESK-1", "price": "10", "vendor_ids": [str(vendor["id"])]},
        }).json()

        response = client.get(f"/api/v1/content-types/products/entries/{product['id']}/form/")

        assert response.status_code == 200
        form = {spec["name"]: spec for spec in response.json()}
        assert form["vendor_ids"]["multiple"] is True
        assert form["vendor_ids"]["choices"] == [{"label": "Acme", "value": vendor["id"], "selected": True}]
        assert form["price"]["options"] == {"step": "0.01"}
