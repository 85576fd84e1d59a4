"""博客文章与评论 API 集成测试。"""

import pytest

from portfolio.db.models import UserRole


async def _create_post(client, headers, **overrides):
    body = {"title": "Hello", "content": "# Hello\n\nworld", "published": True, **overrides}
    r = await client.post("/api/posts", json=body, headers=headers)
    assert r.status_code == 200, r.text
    return r.json()["data"]


class TestPosts:
    @pytest.mark.asyncio
    async def test_create_requires_session(self, client):
        r = await client.post("/api/posts", json={"title": "t", "content": "c"})
        assert r.status_code == 401

    @pytest.mark.asyncio
    async def test_create_requires_title_and_content(self, client, make_user):
        _, headers = await make_user()
        r = await client.post("/api/posts", json={"title": "only title"}, headers=headers)
        assert r.status_code == 400
        assert r.json()["message"] == "Title and content are required"

    @pytest.mark.asyncio
    async def test_list_only_published(self, client, make_user):
        user, headers = await make_user(name="Writer")
        await _create_post(client, headers, title="public")
        await _create_post(client, headers, title="draft", published=False)

        r = await client.get("/api/posts")
        assert r.status_code == 200
        posts = r.json()["data"]
        assert [p["title"] for p in posts] == ["public"]
        assert posts[0]["author"] == {"id": user.id, "name": "Writer", "image": None}

    @pytest.mark.asyncio
    async def test_homepage_filter(self, client, make_user):
        _, headers = await make_user()
        await _create_post(client, headers, title="home", showOnHomepage=True)
        await _create_post(client, headers, title="blog only")

        r = await client.get("/api/posts", params={"homepage": "true"})
        assert [p["title"] for p in r.json()["data"]] == ["home"]

    @pytest.mark.asyncio
    async def test_detail_includes_comments(self, client, make_user):
        _, author_headers = await make_user()
        _, reader_headers = await make_user()
        post = await _create_post(client, author_headers)

        r = await client.post(
            "/api/comments", json={"content": "nice post", "postId": post["id"]}, headers=reader_headers
        )
        assert r.status_code == 200
        assert r.json()["data"]["postId"] == post["id"]

        detail = (await client.get(f"/api/posts/{post['id']}")).json()["data"]
        assert [c["content"] for c in detail["comments"]] == ["nice post"]

    @pytest.mark.asyncio
    async def test_missing_post_404(self, client):
        r = await client.get("/api/posts/does-not-exist")
        assert r.status_code == 404
        assert r.json()["message"] == "Post not found"

    @pytest.mark.asyncio
    async def test_update_by_author(self, client, make_user):
        _, headers = await make_user()
        post = await _create_post(client, headers, featuredImage="/img/a.png")

        r = await client.put(
            f"/api/posts/{post['id']}", json={"title": "Renamed", "featuredImage": None}, headers=headers
        )
        assert r.status_code == 200
        data = r.json()["data"]
        assert data["title"] == "Renamed"
        assert data["content"] == post["content"]
        assert data["featuredImage"] is None

    @pytest.mark.asyncio
    async def test_update_by_stranger_forbidden(self, client, make_user):
        _, owner = await make_user()
        _, stranger = await make_user()
        post = await _create_post(client, owner)
        r = await client.put(f"/api/posts/{post['id']}", json={"title": "x"}, headers=stranger)
        assert r.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_can_delete_with_comments(self, client, make_user):
        _, owner = await make_user()
        _, admin = await make_user(UserRole.ADMIN)
        post = await _create_post(client, owner)
        await client.post("/api/comments", json={"content": "hi", "postId": post["id"]}, headers=owner)

        r = await client.delete(f"/api/posts/{post['id']}", headers=admin)
        assert r.status_code == 200
        assert r.json()["message"] == "Post deleted successfully"
        assert (await client.get(f"/api/posts/{post['id']}")).status_code == 404


class TestComments:
    @pytest.mark.asyncio
    async def test_requires_content_and_post(self, client, make_user):
        _, headers = await make_user()
        r = await client.post("/api/comments", json={"content": "hi"}, headers=headers)
        assert r.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_post(self, client, make_user):
        _, headers = await make_user()
        r = await client.post("/api/comments", json={"content": "hi", "postId": "nope"}, headers=headers)
        assert r.status_code == 404
