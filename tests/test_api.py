"""
HTTP-level tests through FastAPI's TestClient.
"""
from urllib.parse import urlparse

from tests.conftest import auth_headers

ALICE = auth_headers("auth0|alice")
BOB = auth_headers("auth0|bob")


def _create_profile(client, headers, role="shopper", display_name=None):
    body = {"role": role, "display_name": display_name or "Someone"}
    return client.post("/v1/profiles", json=body, headers=headers)


def _user_id(client, headers):
    return client.get("/v1/me", headers=headers).json()["id"]


class TestAuth:

    def test_health(self, client):
        assert client.get("/health").json() == {"ok": True}

    def test_me_requires_token(self, client):
        resp = client.get("/v1/me")
        assert resp.status_code == 401
        assert resp.json()["code"] == "unauthenticated"

    def test_invalid_token(self, client):
        resp = client.get("/v1/me", headers={"Authorization": "Bearer nope"})
        assert resp.status_code == 401

    def test_me_creates_user_once(self, client):
        first = client.get("/v1/me", headers=ALICE).json()
        second = client.get("/v1/me", headers=ALICE).json()
        assert first["id"] == second["id"]
        assert first["email"] == "alice@example.com"

    def test_own_profile_null_when_signed_out(self, client):
        resp = client.get("/v1/profiles/me")
        assert resp.status_code == 200
        assert resp.json() is None


class TestProfileRoutes:

    def test_create_and_read(self, client):
        resp = _create_profile(client, ALICE, display_name="Alice")
        assert resp.status_code == 201
        assert "profile_id" in resp.json()

        me = client.get("/v1/profiles/me", headers=ALICE).json()
        assert me["points"] == 100
        assert me["level"] == 1
        assert me["badges"] == ["newcomer"]

    def test_duplicate_is_conflict(self, client):
        _create_profile(client, ALICE)
        resp = _create_profile(client, ALICE)
        assert resp.status_code == 409
        assert resp.json()["code"] == "already_exists"

    def test_invalid_role_is_validation_error(self, client):
        resp = _create_profile(client, ALICE, role="pastor")
        assert resp.status_code == 422
        assert resp.json()["code"] == "validation_error"

    def test_patch_is_sparse(self, client):
        _create_profile(client, ALICE, display_name="Alice")
        assert client.patch("/v1/profiles/me", json={"bio": "hello"}, headers=ALICE).status_code == 200

        me = client.get("/v1/profiles/me", headers=ALICE).json()
        assert me["bio"] == "hello"
        assert me["display_name"] == "Alice"

    def test_patch_rejects_unknown_fields(self, client):
        _create_profile(client, ALICE)
        resp = client.patch("/v1/profiles/me", json={"points": 1000000}, headers=ALICE)
        assert resp.status_code == 422

    def test_award_points_and_history(self, client):
        _create_profile(client, ALICE)
        resp = client.post(
            "/v1/profiles/me/points",
            json={"points": 950, "action": "challenge", "description": "Finished a reading plan"},
            headers=ALICE,
        )
        assert resp.json() == {"new_points": 1050, "new_level": 2}

        history = client.get("/v1/profiles/me/points", headers=ALICE).json()
        assert [h["action"] for h in history] == ["challenge", "welcome"]

    def test_award_points_without_profile(self, client):
        resp = client.post(
            "/v1/profiles/me/points",
            json={"points": 5, "action": "x", "description": "y"},
            headers=ALICE,
        )
        assert resp.status_code == 404

    def test_profile_by_user_id(self, client):
        _create_profile(client, ALICE, display_name="Alice")
        alice_id = _user_id(client, ALICE)

        resp = client.get(f"/v1/profiles/{alice_id}", headers=BOB)
        assert resp.status_code == 200
        data = resp.json()
        assert data["display_name"] == "Alice"
        assert data["can_follow"] is True
        assert data["is_own_profile"] is False

        assert client.get("/v1/profiles/99999").status_code == 404

    def test_leaderboard_and_people(self, client):
        _create_profile(client, ALICE, display_name="Alice")
        _create_profile(client, BOB, display_name="Bob")
        client.post(
            "/v1/profiles/me/points",
            json={"points": 50, "action": "bonus", "description": "Bonus"},
            headers=BOB,
        )

        board = client.get("/v1/profiles/leaderboard").json()
        assert [p["display_name"] for p in board] == ["Bob", "Alice"]

        people = client.get("/v1/profiles/people", headers=ALICE).json()
        assert {p["display_name"] for p in people} == {"Alice", "Bob"}


class TestPhotoUpload:

    def test_upload_and_attach(self, client):
        _create_profile(client, ALICE)
        issued = client.post("/v1/profiles/me/photo/upload-url", headers=ALICE).json()
        upload = urlparse(issued["upload_url"])

        resp = client.put(f"{upload.path}?{upload.query}", content=b"\x89PNG fake")
        assert resp.status_code == 200
        assert resp.json()["storage_id"] == issued["storage_id"]

        client.put("/v1/profiles/me/photo", json={"storage_id": issued["storage_id"]}, headers=ALICE)
        me = client.get("/v1/profiles/me", headers=ALICE).json()
        assert me["profile_photo_url"].endswith(f"/uploads/{issued['storage_id']}")

        client.delete("/v1/profiles/me/photo", headers=ALICE)
        assert client.get("/v1/profiles/me", headers=ALICE).json()["profile_photo_url"] is None

    def test_upload_with_bad_token(self, client):
        resp = client.put("/v1/media/uploads/abc123?token=forged", content=b"data")
        assert resp.status_code == 403
        assert resp.json()["code"] == "http_error"

    def test_empty_upload(self, client):
        issued = client.post("/v1/social/posts/upload-url", headers=ALICE).json()
        upload = urlparse(issued["upload_url"])
        resp = client.put(f"{upload.path}?{upload.query}", content=b"")
        assert resp.status_code == 400

    def test_oversize_upload_is_refused(self, client, storage, monkeypatch):
        monkeypatch.setattr("routes.media.upload.MAX_UPLOAD_BYTES", 8)
        issued = client.post("/v1/social/posts/upload-url", headers=ALICE).json()
        upload = urlparse(issued["upload_url"])

        resp = client.put(f"{upload.path}?{upload.query}", content=b"x" * 64)

        assert resp.status_code == 413
        assert storage.exists(issued["storage_id"]) is False

    def test_oversize_chunked_upload_is_refused(self, client, storage, monkeypatch):
        monkeypatch.setattr("routes.media.upload.MAX_UPLOAD_BYTES", 8)
        issued = client.post("/v1/social/posts/upload-url", headers=ALICE).json()
        upload = urlparse(issued["upload_url"])

        resp = client.put(f"{upload.path}?{upload.query}", content=iter([b"x" * 5, b"x" * 5]))

        assert resp.status_code == 413
        assert storage.exists(issued["storage_id"]) is False

    def test_malformed_photo_id_is_bad_request(self, client):
        _create_profile(client, ALICE)

        resp = client.put("/v1/profiles/me/photo", json={"storage_id": "avatar-1.jpg"}, headers=ALICE)

        assert resp.status_code == 400
        assert resp.json()["code"] == "invalid_argument"
        assert client.get("/v1/profiles/me", headers=ALICE).status_code == 200
        assert client.get("/v1/profiles/leaderboard").status_code == 200
        assert client.get("/v1/social/posts", headers=ALICE).status_code == 200

    def test_malformed_post_photo_is_bad_request(self, client):
        resp = client.post(
            "/v1/social/posts",
            json={"content": "look", "type": "general", "photo_id": "pic.png"},
            headers=ALICE,
        )
        assert resp.status_code == 400
        assert client.get("/v1/social/posts").json() == []

    def test_cannot_attach_another_users_upload(self, client, storage):
        _create_profile(client, ALICE)
        _create_profile(client, BOB)
        issued = client.post("/v1/profiles/me/photo/upload-url", headers=BOB).json()
        upload = urlparse(issued["upload_url"])
        client.put(f"{upload.path}?{upload.query}", content=b"\x89PNG fake")
        client.put("/v1/profiles/me/photo", json={"storage_id": issued["storage_id"]}, headers=BOB)

        resp = client.put("/v1/profiles/me/photo", json={"storage_id": issued["storage_id"]}, headers=ALICE)
        assert resp.status_code == 400
        client.delete("/v1/profiles/me/photo", headers=ALICE)

        assert storage.exists(issued["storage_id"]) is True
        bob_me = client.get("/v1/profiles/me", headers=BOB).json()
        assert bob_me["profile_photo_url"].endswith(f"/uploads/{issued['storage_id']}")


class TestFollowRoutes:

    def test_follow_unfollow(self, client):
        alice_id = _user_id(client, ALICE)
        _user_id(client, BOB)

        first = client.post(f"/v1/followers/{alice_id}/follow", headers=BOB).json()
        second = client.post(f"/v1/followers/{alice_id}/follow", headers=BOB).json()
        assert first == {"changed": True, "followers_count": 1}
        assert second == {"changed": False, "followers_count": 1}

        stats = client.get(f"/v1/followers/{alice_id}/stats", headers=BOB).json()
        assert stats["is_following"] is True
        assert stats["followers_count"] == 1

        assert len(client.get(f"/v1/followers/{alice_id}/followers").json()) == 1

        resp = client.delete(f"/v1/followers/{alice_id}/follow", headers=BOB).json()
        assert resp == {"changed": True, "followers_count": 0}
        assert client.get(f"/v1/followers/{alice_id}/stats").json()["followers_count"] == 0

    def test_self_follow(self, client):
        alice_id = _user_id(client, ALICE)
        resp = client.post(f"/v1/followers/{alice_id}/follow", headers=ALICE)
        assert resp.status_code == 400
        assert resp.json()["code"] == "invalid_argument"

    def test_follow_unknown_user(self, client):
        resp = client.post("/v1/followers/99999/follow", headers=ALICE)
        assert resp.status_code == 404


class TestSocialRoutes:

    def test_post_comment_like_flow(self, client):
        _create_profile(client, ALICE, display_name="Alice")
        _create_profile(client, BOB, display_name="Bob")

        post = client.post(
            "/v1/social/posts",
            json={"content": "For God so loved the world", "type": "verse", "tags": ["john"]},
            headers=ALICE,
        )
        assert post.status_code == 201
        post_id = post.json()["id"]
        assert client.get("/v1/profiles/me", headers=ALICE).json()["points"] == 120

        comment = client.post(f"/v1/social/posts/{post_id}/comments", json={"content": "Amen"}, headers=BOB)
        assert comment.status_code == 201
        comment_id = comment.json()["id"]

        reply = client.post(f"/v1/social/comments/{comment_id}/replies", json={"content": "🙏"}, headers=ALICE)
        assert reply.status_code == 201

        assert client.post(f"/v1/social/posts/{post_id}/like", headers=BOB).json() == {"liked": True}
        assert client.post(f"/v1/social/comments/{comment_id}/like", headers=ALICE).json() == {"liked": True}

        feed = client.get("/v1/social/posts", headers=BOB).json()
        assert feed[0]["id"] == post_id
        assert feed[0]["author"] == "Alice"
        assert feed[0]["likes"] == 1
        assert feed[0]["comments"] == 1
        assert feed[0]["has_liked"] is True

        thread = client.get(f"/v1/social/posts/{post_id}/comments", headers=ALICE).json()
        assert thread[0]["author"] == "Bob"
        assert thread[0]["has_liked"] is True
        assert thread[0]["replies"][0]["content"] == "🙏"

        # verse 20 + reply 5 + like received 5
        assert client.get("/v1/profiles/me", headers=ALICE).json()["points"] == 130
        # comment 5 + comment like received 5
        assert client.get("/v1/profiles/me", headers=BOB).json()["points"] == 110

    def test_unlike_routes(self, client):
        post_id = client.post(
            "/v1/social/posts", json={"content": "hello", "type": "general"}, headers=ALICE
        ).json()["id"]

        assert client.delete(f"/v1/social/posts/{post_id}/like", headers=BOB).json() == {"removed": False}
        client.post(f"/v1/social/posts/{post_id}/like", headers=BOB)
        assert client.delete(f"/v1/social/posts/{post_id}/like", headers=BOB).json() == {"removed": True}

        feed = client.get("/v1/social/posts").json()
        assert feed[0]["likes"] == 0

    def test_comment_on_missing_post(self, client):
        resp = client.post("/v1/social/posts/404/comments", json={"content": "hi"}, headers=ALICE)
        assert resp.status_code == 404
        assert resp.json() == {"code": "not_found", "message": "Post not found"}

    def test_bad_post_type(self, client):
        resp = client.post("/v1/social/posts", json={"content": "x", "type": "sermon"}, headers=ALICE)
        assert resp.status_code == 422

    def test_user_search(self, client):
        _create_profile(client, ALICE, display_name="Grace Adeyemi")
        assert client.get("/v1/social/users/search", params={"q": "g"}).json() == []
        results = client.get("/v1/social/users/search", params={"q": "grace"}).json()
        assert [r["display_name"] for r in results] == ["Grace Adeyemi"]
