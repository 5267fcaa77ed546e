"""Tests for API endpoints."""

import pytest


@pytest.mark.asyncio
class TestAPIEndpoints:
    """Test API endpoints."""

    async def test_create_link(self, client, sample_urls):
        """Test POST /api/links."""
        response = await client.post(
            "/api/links",
            json={"url": sample_urls[0], "validity_minutes": 30}
        )

        assert response.status_code == 201
        data = response.json()
        assert len(data["code"]) == 6
        assert data["original_url"] == sample_urls[0]
        assert data["short_url"] == f"http://testserver/{data['code']}"
        assert data["validity_minutes"] == 30
        assert data["clicks"] == 0
        assert data["expired"] is False
        assert data["created_at"] == "2024-01-01T12:00:00Z"
        assert data["expires_at"] == "2024-01-01T12:30:00Z"

    async def test_create_uses_default_validity(self, client, sample_urls):
        response = await client.post("/api/links", json={"url": sample_urls[0]})

        assert response.status_code == 201
        assert response.json()["validity_minutes"] == 30

    async def test_create_with_custom_code(self, client, sample_urls):
        """Test POST /api/links with custom code."""
        response = await client.post(
            "/api/links",
            json={"url": sample_urls[0], "custom_code": "my-link", "validity_minutes": 10}
        )

        assert response.status_code == 201
        assert response.json()["code"] == "my-link"

    async def test_blank_custom_code_means_generated(self, client, sample_urls):
        response = await client.post(
            "/api/links",
            json={"url": sample_urls[0], "custom_code": "   "}
        )

        assert response.status_code == 201
        assert len(response.json()["code"]) == 6

    async def test_short_url_behind_proxy(self, client, sample_urls):
        response = await client.post(
            "/api/links",
            json={"url": sample_urls[0], "custom_code": "proxied"},
            headers={
                "X-Forwarded-Proto": "https",
                "X-Forwarded-Host": "sho.rt",
                "X-Forwarded-Prefix": "/s",
            },
        )

        assert response.json()["short_url"] == "https://sho.rt/s/proxied"

    @pytest.mark.parametrize("body, kind", [
        ({"url": "not-a-url"}, "invalid_url"),
        ({"url": "https://x.com", "validity_minutes": 0}, "invalid_validity"),
        ({"url": "https://x.com", "validity_minutes": 1441}, "invalid_validity"),
        ({"url": "https://x.com", "custom_code": "bad code"}, "invalid_code_format"),
        ({"url": "https://x.com", "custom_code": "health"}, "invalid_code_format"),
        ({"url": "https://x.com", "custom_code": " my-link "}, "invalid_code_format"),
    ])
    async def test_create_rejects_bad_input(self, client, body, kind):
        response = await client.post("/api/links", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == kind

        listing = await client.get("/api/links")
        assert listing.json()["count"] == 0

    async def test_create_duplicate_custom_code(self, client, sample_urls):
        """Test POST /api/links with duplicate custom code."""
        await client.post(
            "/api/links",
            json={"url": sample_urls[0], "custom_code": "my-link"}
        )

        response = await client.post(
            "/api/links",
            json={"url": sample_urls[1], "custom_code": "my-link"}
        )

        assert response.status_code == 409
        assert response.json()["error"] == "code_taken"

        info = await client.get("/api/links/my-link")
        assert info.json()["original_url"] == sample_urls[0]

    async def test_get_link(self, client, sample_urls):
        """Test GET /api/links/{code}."""
        create_response = await client.post("/api/links", json={"url": sample_urls[0]})
        code = create_response.json()["code"]

        response = await client.get(f"/api/links/{code}")

        assert response.status_code == 200
        data = response.json()
        assert data["code"] == code
        assert data["original_url"] == sample_urls[0]
        assert data["clicks"] == 0

    async def test_get_link_not_found(self, client):
        """Test GET /api/links/{code} for nonexistent code."""
        response = await client.get("/api/links/nonexistent")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    async def test_list_links(self, client, clock, sample_urls):
        for i, url in enumerate(sample_urls):
            await client.post("/api/links", json={"url": url, "custom_code": f"link{i}", "validity_minutes": 5})
            clock.advance(minutes=2)

        response = await client.get("/api/links")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 3
        assert [link["code"] for link in data["links"]] == ["link2", "link1", "link0"]
        # link0 was created six minutes ago with a five-minute window
        assert [link["expired"] for link in data["links"]] == [False, False, True]

    async def test_list_links_limit(self, client, sample_urls):
        for url in sample_urls:
            await client.post("/api/links", json={"url": url})

        response = await client.get("/api/links", params={"limit": 2})

        assert response.json()["count"] == 2

        response = await client.get("/api/links", params={"limit": 0})
        assert response.status_code == 422

    async def test_delete_link(self, client, sample_urls):
        create_response = await client.post("/api/links", json={"url": sample_urls[0]})
        code = create_response.json()["code"]

        response = await client.delete(f"/api/links/{code}")
        assert response.status_code == 204

        response = await client.delete(f"/api/links/{code}")
        assert response.status_code == 404

        response = await client.get(f"/{code}")
        assert response.status_code == 404

    async def test_health_check(self, client):
        """Test GET /api/health."""
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["store"] == "healthy"


@pytest.mark.asyncio
class TestRedirect:
    """Test the short-code redirect route."""

    async def test_redirect_counts_click(self, client, sample_urls):
        await client.post("/api/links", json={"url": sample_urls[0], "custom_code": "go"})

        response = await client.get("/go")

        assert response.status_code == 302
        assert response.headers["location"] == sample_urls[0]
        info = await client.get("/api/links/go")
        assert info.json()["clicks"] == 1

    async def test_redirect_unknown(self, client):
        response = await client.get("/nothere")

        assert response.status_code == 404

    async def test_redirect_expired_is_gone(self, client, clock, sample_urls):
        await client.post("/api/links", json={"url": sample_urls[0], "custom_code": "old", "validity_minutes": 1})
        await client.get("/old")
        clock.advance(minutes=1, seconds=1)

        response = await client.get("/old")

        assert response.status_code == 410
        info = await client.get("/api/links/old")
        assert info.json()["clicks"] == 1
        assert info.json()["expired"] is True

    async def test_simple_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
