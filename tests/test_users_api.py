# File: tests/test_users_api.py

def test_health_endpoint(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_subscribe_flow(client, register):
    alice_id, alice_token = register("alice", "alice@x.com")
    bob_id, _ = register("bob", "bob@x.com")
    headers = {"Authorization": f"Bearer {alice_token}"}

    resp = client.post(f"/api/v1/users/{bob_id}/subscribe", headers=headers)
    assert resp.status_code == 200
    user = resp.json()["user"]
    assert user["username"] == "bob"
    assert user["subscribersCount"] == 1
    assert user["isSubscribed"] is True

    resp = client.get(f"/api/v1/users/{alice_id}/subscriptions")
    assert resp.json() == {"subscriptions": [{"id": bob_id, "username": "bob", "avatar": None}]}

    resp = client.get(f"/api/v1/users/{bob_id}", headers=headers)
    assert resp.json()["user"]["isSubscribed"] is True

    resp = client.post(f"/api/v1/users/{bob_id}/unsubscribe", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["user"]["subscribersCount"] == 0
    assert resp.json()["user"]["isSubscribed"] is False

    resp = client.get(f"/api/v1/users/{alice_id}/subscriptions")
    assert resp.json() == {"subscriptions": []}


def test_subscribe_twice_counts_once(client, register):
    _, token = register("alice", "alice@x.com")
    bob_id, _ = register("bob", "bob@x.com")
    headers = {"Authorization": f"Bearer {token}"}

    client.post(f"/api/v1/users/{bob_id}/subscribe", headers=headers)
    resp = client.post(f"/api/v1/users/{bob_id}/subscribe", headers=headers)
    assert resp.json()["user"]["subscribersCount"] == 1


def test_delete_subscribe_unsubscribes(client, register):
    _, token = register("alice", "alice@x.com")
    bob_id, _ = register("bob", "bob@x.com")
    headers = {"Authorization": f"Bearer {token}"}

    client.post(f"/api/v1/users/{bob_id}/subscribe", headers=headers)
    resp = client.delete(f"/api/v1/users/{bob_id}/subscribe", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["user"]["subscribersCount"] == 0


def test_unsubscribe_when_not_subscribed(client, register):
    _, token = register("alice", "alice@x.com")
    bob_id, _ = register("bob", "bob@x.com")
    resp = client.post(
        f"/api/v1/users/{bob_id}/unsubscribe",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert resp.status_code == 200
    assert resp.json()["user"]["subscribersCount"] == 0


def test_cannot_subscribe_to_self(client, register):
    alice_id, token = register("alice", "alice@x.com")
    headers = {"Authorization": f"Bearer {token}"}

    for action in ("subscribe", "unsubscribe"):
        resp = client.post(f"/api/v1/users/{alice_id}/{action}", headers=headers)
        assert resp.status_code == 422
        assert resp.json()["code"] == "INVALID_OPERATION"


def test_subscribe_to_unknown_channel(client, register):
    _, token = register("alice", "alice@x.com")
    resp = client.post("/api/v1/users/9999/subscribe", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 404


def test_subscribe_requires_login(client, register):
    bob_id, _ = register("bob", "bob@x.com")
    resp = client.post(f"/api/v1/users/{bob_id}/subscribe")
    assert resp.status_code == 401


def test_public_profile_anonymous(client, register):
    bob_id, _ = register("bob", "bob@x.com")
    resp = client.get(f"/api/v1/users/{bob_id}")
    assert resp.status_code == 200
    assert resp.json()["user"] == {
        "username": "bob",
        "email": "bob@x.com",
        "avatar": None,
        "cover": None,
        "channelDescription": None,
        "subscribersCount": 0,
        "isSubscribed": False,
    }


def test_public_profile_with_bad_token_is_anonymous(client, register):
    bob_id, _ = register("bob", "bob@x.com")
    resp = client.get(f"/api/v1/users/{bob_id}", headers={"Authorization": "Bearer nonsense"})
    assert resp.status_code == 200
    assert resp.json()["user"]["isSubscribed"] is False


def test_public_profile_unknown_user(client):
    resp = client.get("/api/v1/users/9999")
    assert resp.status_code == 404
    assert resp.json()["code"] == "NOT_FOUND"
