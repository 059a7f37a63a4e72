"""Posts, comments and likes through the HTTP surface."""

from __future__ import annotations

import pytest

from tests.factories.comment import CommentFactory
from tests.factories.post import PostFactory
from tests.factories.user import UserFactory
from tests.helpers.utils import file_payload


@pytest.fixture()
def author():
    return UserFactory()


@pytest.fixture()
def headers(author, auth_headers):
    return auth_headers(author)


def _create(client, headers, **overrides):
    body = {"title": "Hello", "content": "World", "files": []}
    body.update(overrides)
    return client.post("/api/v1/post", json=body, headers=headers)


def test_create_and_view_counts(client, headers):
    resp = _create(client, headers)
    assert resp.status_code == 201
    created = resp.get_json()
    assert created["message"] == "Post created"

    first = client.get(f"/api/v1/post/{created['id']}", headers=headers).get_json()
    assert first["stats"]["viewCount"] == 1
    second = client.get(f"/api/v1/post/{created['id']}", headers=headers).get_json()
    assert second["stats"]["viewCount"] == 2
    assert second["title"] == "Hello"
    assert second["files"] == []


def test_file_limit_boundary(client, headers):
    ten = [file_payload(i) for i in range(10)]
    assert _create(client, headers, files=ten).status_code == 201

    eleven = [file_payload(i) for i in range(11)]
    resp = _create(client, headers, files=eleven)
    assert resp.status_code == 400
    assert "at most 10 files" in resp.get_json()["detail"]


def test_file_payload_shape_and_size_coercion(client, headers):
    created = _create(client, headers, files=[file_payload(1, size=-4)]).get_json()
    detail = client.get(f"/api/v1/post/{created['id']}", headers=headers).get_json()
    assert detail["files"] == [
        {
            "url": "https://cdn.example.com/1.png",
            "originalName": "1.png",
            "mimeType": "image/png",
            "size": 0,
        }
    ]


def test_rejects_markup_in_title_and_unknown_mime(client, headers):
    assert _create(client, headers, title="<b>hi</b>").status_code == 400
    bad = _create(client, headers, files=[file_payload(mime_type="application/x-sh")])
    assert bad.status_code == 400
    assert bad.get_json()["code"] == "validation_error"


def test_create_requires_auth(client):
    assert client.post("/api/v1/post", json={"title": "t", "content": "c"}).status_code == 401


def test_comment_thread_scenario(client, headers):
    post_id = _create(client, headers).get_json()["id"]

    c1 = client.post("/api/v1/comment", json={"content": "C1", "postId": post_id}, headers=headers)
    assert c1.status_code == 201
    c1_id = c1.get_json()["id"]
    c2 = client.post(
        "/api/v1/comment",
        json={"content": "C2", "postId": post_id, "parentId": c1_id},
        headers=headers,
    )
    assert c2.status_code == 201

    detail = client.get(f"/api/v1/post/{post_id}", headers=headers).get_json()
    assert len(detail["comments"]) == 1
    assert detail["comments"][0]["id"] == c1_id
    children = detail["comments"][0]["children"]
    assert [c["id"] for c in children] == [c2.get_json()["id"]]
    assert detail["stats"]["commentCount"] == 2


def test_reply_to_comment_on_another_post_fails(client, headers):
    post = PostFactory()
    foreign = CommentFactory()
    resp = client.post(
        "/api/v1/comment",
        json={"content": "x", "postId": post.id, "parentId": foreign.id},
        headers=headers,
    )
    assert resp.status_code == 400


def test_delete_comment_ownership(client, headers, auth_headers):
    comment = CommentFactory()
    resp = client.delete(f"/api/v1/comment/{comment.id}", headers=headers)
    assert resp.status_code == 403

    owner = auth_headers(comment.author)
    assert client.delete(f"/api/v1/comment/{comment.id}", headers=owner).status_code == 200


def test_update_and_delete_post(client, headers, auth_headers):
    post_id = _create(client, headers).get_json()["id"]

    resp = client.patch(
        f"/api/v1/post/{post_id}",
        json={"title": "New", "content": "Body", "files": [file_payload(3)]},
        headers=headers,
    )
    assert resp.status_code == 200
    detail = client.get(f"/api/v1/post/{post_id}", headers=headers).get_json()
    assert detail["title"] == "New"
    assert [f["originalName"] for f in detail["files"]] == ["3.png"]

    stranger = auth_headers(UserFactory())
    assert client.patch(
        f"/api/v1/post/{post_id}", json={"title": "x", "content": "y"}, headers=stranger
    ).status_code == 404
    assert client.delete(f"/api/v1/post/{post_id}", headers=stranger).status_code == 401

    assert client.delete(f"/api/v1/post/{post_id}", headers=headers).status_code == 200
    assert client.get(f"/api/v1/post/{post_id}", headers=headers).status_code == 404
    assert client.delete(f"/api/v1/post/{post_id}", headers=headers).status_code == 404


def test_like_unlike_and_counters(client, headers):
    post = PostFactory()

    assert client.post(f"/api/v1/like/{post.id}", headers=headers).status_code == 201
    assert client.post(f"/api/v1/like/{post.id}", headers=headers).status_code == 403
    assert client.get(f"/api/v1/post/{post.id}", headers=headers).get_json()["stats"]["likeCount"] == 1

    assert client.delete(f"/api/v1/like/{post.id}", headers=headers).status_code == 200
    assert client.delete(f"/api/v1/like/{post.id}", headers=headers).status_code == 404
    assert client.get(f"/api/v1/post/{post.id}", headers=headers).get_json()["stats"]["likeCount"] == 0


def test_list_my_posts_by_likes(client, headers, author):
    low = PostFactory(author=author, stats__like_count=1)
    high = PostFactory(author=author, stats__like_count=9)

    resp = client.get("/api/v1/post/list/posts?sortBy=like", headers=headers)
    assert resp.status_code == 200
    body = resp.get_json()
    assert [p["id"] for p in body["posts"]] == [high.id, low.id]
    assert body["posts"][0]["author"] == {"id": author.id, "name": author.name}

    assert client.get("/api/v1/post/list/posts?sortBy=views", headers=headers).status_code == 400


def test_search(client, headers):
    hit = PostFactory(title="Sourdough starter", author=UserFactory(nickname="zqbaker"))
    PostFactory(title="unrelated", content="text")

    resp = client.get("/api/v1/post/search?query=SOURDOUGH&type=title_data", headers=headers)
    assert resp.status_code == 200
    assert [p["id"] for p in resp.get_json()] == [hit.id]

    by_nick = client.get("/api/v1/post/search?query=qbak&type=nickname", headers=headers).get_json()
    assert by_nick[0]["author"]["nickname"] == "zqbaker"

    assert client.get("/api/v1/post/search?type=title_data", headers=headers).status_code == 400
    assert client.get("/api/v1/post/search?query=x&type=body", headers=headers).status_code == 400
