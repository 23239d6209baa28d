"""
HTTP tests for the object routers.

Tests cover:
- Status codes, headers and error envelopes per endpoint
- Collection parameter validation
- Batch requests
"""

from objects_api.models import StoredObject


class TestCollectionRoutes:
    """GET/POST on /api/v1/{rest_base}"""

    def test_create_returns_location(self, client, login):
        """POST returns 201, the edit envelope and a Location header."""
        login("admin")

        response = client.post("/api/v1/pages", json={"title": "About", "status": "publish"})

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "About"
        assert data["author"] == 1
        assert response.headers["location"].endswith(f"/api/v1/pages/{data['id']}")

    def test_create_with_id_is_rejected(self, client, login, make_object):
        """A create carrying an ID is a 400 error envelope."""
        login("admin")
        page = make_object("page")

        response = client.post("/api/v1/pages", json={"id": page.id, "title": "Copy"})

        assert response.status_code == 400
        assert response.json()["code"] == "page_exists"
        assert response.json()["data"]["status"] == 400

    def test_create_anonymous(self, client):
        """Anonymous creates are 401."""
        response = client.post("/api/v1/pages", json={"title": "x"})

        assert response.status_code == 401
        assert response.json()["code"] == "user_cannot_create_page"

    def test_create_invalid_parent(self, client, login):
        """Adapter errors are returned with their own status."""
        login("editor")

        response = client.post("/api/v1/pages", json={"title": "x", "parent": 9999})

        assert response.status_code == 400
        assert response.json()["code"] == "page_invalid_parent"

    def test_list_headers(self, client, make_object):
        """Totals and links are sent as headers."""
        for _ in range(3):
            make_object("post")

        response = client.get("/api/v1/posts", params={"per_page": 2})

        assert response.status_code == 200
        assert len(response.json()) == 2
        assert response.headers["x-total-count"] == "3"
        assert response.headers["x-total-pages"] == "2"
        assert 'rel="next"' in response.headers["link"]
        assert "per_page=2" in response.headers["link"]

    def test_out_of_bounds_page(self, client, make_object):
        """Page 2 of 5 items returns an empty page with real totals."""
        for _ in range(5):
            make_object("page")

        response = client.get("/api/v1/pages", params={"page": 2})

        assert response.status_code == 200
        assert response.json() == []
        assert response.headers["x-total-count"] == "5"
        assert response.headers["x-total-pages"] == "1"

    def test_parent_filter_on_pages(self, client, make_object):
        """Hierarchical collections filter by parent."""
        root = make_object("page")
        child = make_object("page", parent_id=root.id)

        response = client.get("/api/v1/pages", params={"parent": root.id})

        assert [item["id"] for item in response.json()] == [child.id]

    def test_parent_ignored_on_posts(self, client, make_object):
        """Non-hierarchical collections ignore parent."""
        make_object("post")
        make_object("post")

        response = client.get("/api/v1/posts", params={"parent": 1})

        assert response.status_code == 200
        assert len(response.json()) == 2
        assert "parent" not in response.json()[0]

    def test_include_order(self, client, make_object):
        """orderby=include keeps the requested order."""
        first, second, third = make_object("post"), make_object("post"), make_object("post")

        response = client.get(
            "/api/v1/posts",
            params={"include": f"{second.id},{third.id},{first.id}", "orderby": "include"},
        )

        assert [item["id"] for item in response.json()] == [second.id, third.id, first.id]

    def test_include_repeated_keys(self, client, make_object):
        """include[]=.. repeated keys are accepted."""
        first, second = make_object("post"), make_object("post")
        make_object("post")

        response = client.get(f"/api/v1/posts?include[]={first.id}&include[]={second.id}")

        assert {item["id"] for item in response.json()} == {first.id, second.id}

    def test_invalid_per_page(self, client):
        """per_page outside its range is rest_invalid_param."""
        response = client.get("/api/v1/posts", params={"per_page": 0})

        assert response.status_code == 400
        assert response.json()["code"] == "rest_invalid_param"
        assert "per_page" in response.json()["data"]["params"]

    def test_edit_context_anonymous(self, client):
        """context=edit requires edit rights."""
        response = client.get("/api/v1/posts", params={"context": "edit"})

        assert response.status_code == 401

    def test_edit_context_editor(self, client, login, make_object):
        """Editors see edit-only fields."""
        login("editor")
        make_object("post", author_id=3)

        response = client.get("/api/v1/posts", params={"context": "edit"})

        assert response.status_code == 200
        assert response.json()[0]["author"] == 3
        assert "meta" in response.json()[0]


class TestItemRoutes:
    """GET/PUT/PATCH/DELETE on /api/v1/{rest_base}/{id}"""

    def test_get_item(self, client, make_object):
        """Published objects are readable anonymously."""
        post = make_object("post", title="Hello")

        response = client.get(f"/api/v1/posts/{post.id}")

        assert response.status_code == 200
        assert response.json()["title"] == "Hello"
        assert "author" not in response.json()

    def test_get_missing(self, client):
        """Unknown IDs are 404 with the type-specific code."""
        response = client.get("/api/v1/pages/999")

        assert response.status_code == 404
        assert response.json()["code"] == "page_invalid_id"
        assert response.json()["data"]["status"] == 404

    def test_get_draft_anonymous(self, client, make_object):
        """Drafts are hidden from anonymous requesters."""
        draft = make_object("page", status="draft")

        response = client.get(f"/api/v1/pages/{draft.id}")

        assert response.status_code == 401

    def test_patch(self, client, login, make_object):
        """PATCH changes only the sent fields."""
        login("admin")
        page = make_object("page", title="Old", content="Body")

        response = client.patch(f"/api/v1/pages/{page.id}", json={"title": "New"})

        assert response.status_code == 200
        assert response.json()["title"] == "New"
        assert response.json()["content"] == "Body"

    def test_put_missing(self, client, login):
        """Updates of missing objects are 404."""
        login("admin")

        response = client.put("/api/v1/pages/999", json={"title": "New"})

        assert response.status_code == 404

    def test_update_additional_field(self, client, login, make_object):
        """Registered fields are written and returned."""
        login("admin")
        post = make_object("post")

        response = client.patch(f"/api/v1/posts/{post.id}", json={"subtitle": "A subtitle"})

        assert response.status_code == 200
        assert response.json()["subtitle"] == "A subtitle"

    def test_update_invalid_additional_field(self, client, login, make_object):
        """Field errors are returned after the core update was kept."""
        login("admin")
        post = make_object("post", title="Before")

        response = client.patch(f"/api/v1/posts/{post.id}", json={"title": "After", "subtitle": 42})

        assert response.status_code == 400
        assert response.json()["code"] == "rest_invalid_param"
        assert client.get(f"/api/v1/posts/{post.id}").json()["title"] == "After"

    def test_delete_anonymous(self, client, make_object):
        """Anonymous deletes are 401."""
        page = make_object("page")

        response = client.delete(f"/api/v1/pages/{page.id}")

        assert response.status_code == 401

    def test_delete_missing(self, client):
        """Deleting an unknown ID is 404 before any permission check."""
        response = client.delete("/api/v1/pages/999")

        assert response.status_code == 404

    def test_trash_then_gone(self, client, login, make_object):
        """Soft delete, then 410 on the second attempt."""
        login("admin")
        page = make_object("page")

        first = client.delete(f"/api/v1/pages/{page.id}")
        second = client.delete(f"/api/v1/pages/{page.id}")

        assert first.status_code == 200
        assert first.json()["deleted"] is True
        assert first.json()["previous"]["status"] == "publish"
        assert second.status_code == 410
        assert second.json()["code"] == "already_trashed"

    def test_force_delete(self, client, login, db_session, make_object):
        """force=true removes the object permanently."""
        login("admin")
        page = make_object("page", title="Gone")
        page_id = page.id

        response = client.delete(f"/api/v1/pages/{page_id}", params={"force": "true"})

        assert response.status_code == 200
        assert response.json()["deleted"] is True
        assert response.json()["previous"]["title"] == "Gone"
        db_session.expire_all()
        assert db_session.get(StoredObject, page_id) is None
        assert client.get(f"/api/v1/pages/{page_id}").status_code == 404


class TestBatchRoute:
    """POST /api/v1/{rest_base}/batch"""

    def test_batch(self, client, login, make_object):
        """Each item is reported on its own."""
        login("admin")
        existing = make_object("post")
        doomed = make_object("post")

        response = client.post(
            "/api/v1/posts/batch",
            json={
                "create": [{"title": "New"}, {"title": "Bad", "status": "trash"}],
                "update": [{"id": existing.id, "title": "Renamed"}],
                "delete": [doomed.id, 999],
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["create"][0]["title"] == "New"
        assert body["create"][1]["code"] == "rest_invalid_param"
        assert body["update"][0]["title"] == "Renamed"
        assert body["delete"][0]["deleted"] is True
        assert body["delete"][1]["code"] == "post_invalid_id"

    def test_batch_limit(self, client, login):
        """More than the allowed number of items is 413."""
        login("admin")

        response = client.post("/api/v1/posts/batch", json={"delete": list(range(1, 102))})

        assert response.status_code == 413
        assert response.json()["code"] == "request_entity_too_large"


class TestApplication:
    """App-level behavior."""

    def test_health(self, client):
        """Health endpoint responds."""
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_unsupported_media_type(self, client, login):
        """Bodies must be JSON."""
        login("admin")

        response = client.post(
            "/api/v1/pages",
            content="title=x",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

        assert response.status_code == 415
        assert response.json()["code"] == "rest_unsupported_media_type"

    def test_correlation_id_header(self, client):
        """Responses echo a request ID."""
        response = client.get("/api/health", headers={"X-Request-ID": "abc-123"})

        assert response.headers["x-request-id"] == "abc-123"
