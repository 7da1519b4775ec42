import pytest
from fastapi.testclient import TestClient


def create_post(client: TestClient, title: str, publish: bool = True) -> dict:
    status = "published" if publish else "draft"
    response = client.post("/api/v1/content-types/blog/entries/", json={
        "status": status,
        "fields": {"title": title, "content": "Body text"},
    })
    assert response.status_code == 201
    return response.json()


@pytest.mark.integration
class TestSiteRoutes:

    def test_archive_lists_published_entries_only(self, client: TestClient):
        create_post(client, "Live post")
        create_post(client, "Draft post", publish=False)

        response = client.get("/blog")

        assert response.status_code == 200
        data = response.json()
        assert data["content_type"] == "blog"
        assert data["display_name"] == "Blog Post"
        assert [item["slug"] for item in data["items"]] == ["live-post"]

    def test_single_shows_published_entry(self, client: TestClient):
        create_post(client, "Live post")

        response = client.get("/blog/live-post")

        assert response.status_code == 200
        assert response.json()["fields"]["title"] == "Live post"
        assert response.json()["url"] == "/blog/live-post"

    def test_single_hides_drafts(self, client: TestClient):
        create_post(client, "Draft post", publish=False)

        response = client.get("/blog/draft-post")

        assert response.status_code == 404
        assert response.json()["error"]["type"] == "Not Found"

    def test_archive_only_types_have_no_single_route(self, client: TestClient):
        client.post("/api/v1/content-types/faqs/entries/", json={
            "status": "published",
            "fields": {"question": "Shipping?", "answer": "Worldwide."},
        })

        assert client.get("/help/faqs").json()["items"][0]["slug"] == "shipping"
        assert client.get("/help/faqs/shipping").status_code == 404
