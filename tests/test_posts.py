"""Tests for the post CRUD API."""

from __future__ import annotations

import pytest

from tests.conftest import create_post, sample_post


@pytest.mark.asyncio
async def test_list_empty(client):
    resp = await client.get("/api/posts")
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.asyncio
async def test_create_requires_auth(client):
    resp = await client.post("/api/posts", json=sample_post())
    assert resp.status_code == 401
    assert resp.json() == {"error": "Unauthorized"}


@pytest.mark.asyncio
async def test_create_post(admin_client):
    data = await create_post(admin_client)
    assert data["success"] is True
    assert data["id"].startswith("post_")
    assert data["title"] == "Sum of divisors"
    assert data["tags"] == ["number-theory"]
    assert data["timestamp"] > 0
    assert data["updated"] == data["timestamp"]


@pytest.mark.asyncio
async def test_create_keeps_client_id_and_timestamps(admin_client):
    data = await create_post(admin_client, id="post_1700000000000", timestamp=1700000000000)
    assert data["id"] == "post_1700000000000"
    assert data["timestamp"] == 1700000000000


@pytest.mark.asyncio
async def test_create_duplicate_id(admin_client):
    await create_post(admin_client, id="dup")
    resp = await admin_client.post("/api/posts", json=sample_post(id="dup"))
    assert resp.status_code == 409
    assert resp.json()["error"] == "Post already exists"


@pytest.mark.asyncio
async def test_create_missing_field(admin_client):
    body = sample_post()
    del body["content"]
    resp = await admin_client.post("/api/posts", json=body)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing required field: content"


@pytest.mark.asyncio
async def test_create_blank_title(admin_client):
    resp = await admin_client.post("/api/posts", json=sample_post(title="   "))
    assert resp.status_code == 400
    assert resp.json()["error"] == "title: must not be blank"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"category": "poetry"},
        {"difficulty": "impossible"},
        {"id": "has spaces"},
        {"tags": ["x" * 51]},
        {"tags": [f"t{i}" for i in range(21)]},
    ],
)
async def test_create_invalid_fields(admin_client, overrides):
    resp = await admin_client.post("/api/posts", json=sample_post(**overrides))
    assert resp.status_code == 400
    assert "error" in resp.json()


@pytest.mark.asyncio
async def test_tags_normalized(admin_client):
    data = await create_post(admin_client, tags=[" dp ", "dp", "", "greedy"])
    assert data["tags"] == ["dp", "greedy"]


@pytest.mark.asyncio
async def test_content_stored_verbatim(admin_client):
    raw = "# T\r\n\r\n<b>not html</b>\n```js\nx\n"
    data = await create_post(admin_client, content=raw)
    resp = await admin_client.get(f"/api/posts/{data['id']}")
    assert resp.json()["content"] == raw


@pytest.mark.asyncio
async def test_get_missing(client):
    resp = await client.get("/api/posts/nope")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Post not found"}


@pytest.mark.asyncio
async def test_list_newest_first(admin_client):
    await create_post(admin_client, id="old", timestamp=1000)
    await create_post(admin_client, id="new", timestamp=3000)
    await create_post(admin_client, id="mid", timestamp=2000)
    resp = await admin_client.get("/api/posts")
    assert [p["id"] for p in resp.json()] == ["new", "mid", "old"]


@pytest.mark.asyncio
async def test_list_pagination(admin_client):
    for i in range(5):
        await create_post(admin_client, id=f"p{i}", timestamp=1000 + i)
    resp = await admin_client.get("/api/posts", params={"offset": 1, "limit": 2})
    assert [p["id"] for p in resp.json()] == ["p3", "p2"]


@pytest.mark.asyncio
async def test_list_search_is_case_insensitive(admin_client):
    await create_post(admin_client, id="a", title="Segment Trees")
    await create_post(admin_client, id="b", description="about LAZY propagation")
    await create_post(admin_client, id="c", content="nothing here")
    resp = await admin_client.get("/api/posts", params={"q": "segment"})
    assert [p["id"] for p in resp.json()] == ["a"]
    resp = await admin_client.get("/api/posts", params={"q": "lazy"})
    assert [p["id"] for p in resp.json()] == ["b"]


@pytest.mark.asyncio
async def test_list_search_wildcards_are_literal(admin_client):
    await create_post(admin_client, id="pct", content="100% sure")
    await create_post(admin_client, id="other", content="1000 sure")
    resp = await admin_client.get("/api/posts", params={"q": "0% s"})
    assert [p["id"] for p in resp.json()] == ["pct"]
    resp = await admin_client.get("/api/posts", params={"q": "_"})
    assert resp.json() == []


@pytest.mark.asyncio
async def test_list_filter_category_and_tag(admin_client):
    await create_post(admin_client, id="m", category="math", tags=["graph-theory"])
    await create_post(admin_client, id="c", category="cp", tags=["graph"])
    resp = await admin_client.get("/api/posts", params={"category": "cp"})
    assert [p["id"] for p in resp.json()] == ["c"]
    resp = await admin_client.get("/api/posts", params={"tag": "graph"})
    assert [p["id"] for p in resp.json()] == ["c"]
    resp = await admin_client.get("/api/posts", params={"tag": "graph-theory"})
    assert [p["id"] for p in resp.json()] == ["m"]


@pytest.mark.asyncio
async def test_update_post(admin_client):
    data = await create_post(admin_client, timestamp=1000, updated=1000)
    body = sample_post(title="New title", tags=["a", "b"], difficulty="hard")
    resp = await admin_client.put(f"/api/posts/{data['id']}", json=body)
    assert resp.status_code == 200
    updated = resp.json()
    assert updated["success"] is True
    assert updated["title"] == "New title"
    assert updated["tags"] == ["a", "b"]
    assert updated["difficulty"] == "hard"
    assert updated["timestamp"] == 1000
    assert updated["updated"] > 1000

    resp = await admin_client.get(f"/api/posts/{data['id']}")
    assert resp.json()["title"] == "New title"


@pytest.mark.asyncio
async def test_update_missing(admin_client):
    resp = await admin_client.put("/api/posts/nope", json=sample_post())
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_update_and_delete_require_auth(admin_client):
    data = await create_post(admin_client)
    admin_client.cookies.clear()
    resp = await admin_client.put(f"/api/posts/{data['id']}", json=sample_post())
    assert resp.status_code == 401
    resp = await admin_client.delete(f"/api/posts/{data['id']}")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_delete_post(admin_client):
    data = await create_post(admin_client)
    resp = await admin_client.delete(f"/api/posts/{data['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    resp = await admin_client.get(f"/api/posts/{data['id']}")
    assert resp.status_code == 404
    resp = await admin_client.delete(f"/api/posts/{data['id']}")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_tags_index(admin_client):
    await create_post(admin_client, id="old", timestamp=1, tags=["b", "a"])
    await create_post(admin_client, id="new", timestamp=2, tags=["c", "b"])
    resp = await admin_client.get("/api/tags")
    assert resp.json() == {"tags": ["c", "b", "a"]}


@pytest.mark.asyncio
async def test_post_html(admin_client):
    data = await create_post(admin_client, content="## Hi <there>\n```py\nx = 1\n```")
    resp = await admin_client.get(f"/api/posts/{data['id']}/html")
    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == data["id"]
    assert ">Hi &lt;there&gt;</h2>" in body["html"]
    assert '<code class="language-py">x = 1</code>' in body["html"]


@pytest.mark.asyncio
async def test_render_preview(client):
    resp = await client.post("/api/render", json={"content": "- a\n- b"})
    assert resp.status_code == 200
    assert resp.json()["html"].count("<li>") == 2


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.json() == {"status": "ok"}
