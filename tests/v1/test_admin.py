# tests/v1/test_admin.py
"""Tests for moderation endpoints."""

import pytest
from fastapi import status

from slapboard.core.security import create_admin_token
from slapboard.models import PostStatus, Vote


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": "Bearer not-a-token"},
    ],
)
def test_admin_requires_token(client, headers) -> None:
    response = client.get("/api/v1/admin/posts/pending", headers=headers)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_admin_rejects_expired_token(client) -> None:
    token = create_admin_token("moderator", expires_minutes=-1)
    response = client.get(
        "/api/v1/admin/posts/pending",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_pending_queue_and_approval(client, admin_headers, make_post) -> None:
    pending = make_post("Pending", status=PostStatus.PENDING)
    make_post("Approved")

    queue = client.get("/api/v1/admin/posts/pending", headers=admin_headers).json()
    assert [item["id"] for item in queue] == [pending.id]

    response = client.patch(
        f"/api/v1/admin/posts/{pending.id}",
        json={"status": "approved"},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "approved"
    assert client.get(f"/api/v1/posts/{pending.id}").status_code == status.HTTP_200_OK


@pytest.mark.parametrize("target", ["published", "pending"])
def test_invalid_status_is_422(client, admin_headers, make_post, target) -> None:
    post = make_post("Ada Lovelace")
    response = client.patch(
        f"/api/v1/admin/posts/{post.id}",
        json={"status": target},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_bulk_approve(client, admin_headers, make_post) -> None:
    posts = [make_post(f"Figure {index}", status=PostStatus.PENDING) for index in range(3)]

    response = client.post(
        "/api/v1/admin/posts/bulk-approve",
        json={"post_ids": [post.id for post in posts]},
        headers=admin_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    assert {item["status"] for item in response.json()} == {"approved"}
    assert len(client.get("/api/v1/posts/").json()) == 3


def test_delete_post_cascades(client, admin_headers, db_session, make_post, default_actions, add_votes) -> None:
    post = make_post("Ada Lovelace")
    add_votes(post, default_actions["love"], 2)
    post_id = post.id

    response = client.delete(f"/api/v1/admin/posts/{post_id}", headers=admin_headers)

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert db_session.query(Vote).filter(Vote.post_id == post_id).count() == 0
    assert client.get(f"/api/v1/posts/{post_id}/votes").status_code == status.HTTP_404_NOT_FOUND
    assert client.delete(
        f"/api/v1/admin/posts/{post_id}", headers=admin_headers
    ).status_code == status.HTTP_404_NOT_FOUND


def test_custom_action_lifecycle(client, admin_headers, make_post, default_actions) -> None:
    """Suggest "applaud", approve it, vote with it, then revoke it."""
    action_id = client.post("/api/v1/actions/", json={"name": "applaud"}).json()["id"]
    pending = client.get(
        "/api/v1/admin/actions", params={"approved": False}, headers=admin_headers
    ).json()
    assert [item["name"] for item in pending] == ["applaud"]

    post = make_post("Ada Lovelace")
    blocked = client.post("/api/v1/votes/", json={"post_id": post.id, "action_id": action_id})
    assert blocked.status_code == status.HTTP_404_NOT_FOUND

    approved = client.patch(
        f"/api/v1/admin/actions/{action_id}",
        json={"approved": True},
        headers=admin_headers,
    )
    assert approved.json()["approved"] is True
    assert "applaud" in {item["name"] for item in client.get("/api/v1/actions/").json()}

    vote = client.post("/api/v1/votes/", json={"post_id": post.id, "action_id": action_id})
    assert vote.status_code == status.HTTP_201_CREATED
    assert client.get("/api/v1/leaderboard", params={"action": "applaud"}).status_code == 200

    client.patch(
        f"/api/v1/admin/actions/{action_id}",
        json={"approved": False},
        headers=admin_headers,
    )
    assert client.get(f"/api/v1/posts/{post.id}/votes").json() == {}
    assert client.get("/api/v1/leaderboard", params={"action": "applaud"}).status_code == 404


def test_delete_action(client, admin_headers, make_action) -> None:
    applaud = make_action("applaud")
    response = client.delete(f"/api/v1/admin/actions/{applaud.id}", headers=admin_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    missing = client.patch(
        f"/api/v1/admin/actions/{applaud.id}",
        json={"approved": True},
        headers=admin_headers,
    )
    assert missing.status_code == status.HTTP_404_NOT_FOUND


def test_admin_stats(client, admin_headers, make_post, make_action) -> None:
    make_post("Pending", status=PostStatus.PENDING)
    make_action("applaud", approved=False)

    response = client.get("/api/v1/admin/stats", headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["pending_posts"] == 1
    assert response.json()["pending_actions"] == 1
