from config import LOCKOUT_TIME
from party_picks.identity import OAUTH_STATE_SESSION_KEY


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json()["status"] == "healthy"


def test_event_info_before_lockout(client):
    data = client.get("/api/event").get_json()
    assert data["is_locked"] is False
    assert data["seconds_until_lockout"] == 86400
    assert data["countdown"] == "1d 0h 0m"
    assert data["category_count"] == 15


def test_categories(client):
    groups = client.get("/api/categories").get_json()["groups"]
    assert sum(len(g["categories"]) for g in groups) == 15


def test_user_routes_require_sign_in(client):
    assert client.get("/parties/").status_code == 401
    assert client.post("/picks/winner", json={"option": "seahawks"}).status_code == 401
    response = client.get("/auth/me")
    assert response.status_code == 401
    assert response.get_json()["code"] == "AuthenticationRequired"


def test_login_redirects_to_google_with_state(client):
    response = client.get("/auth/login")
    assert response.status_code == 302
    assert response.headers["Location"].startswith("https://accounts.google.com/")
    with client.session_transaction() as sess:
        assert sess[OAUTH_STATE_SESSION_KEY] in response.headers["Location"]


def test_callback_rejects_mismatched_state(client):
    with client.session_transaction() as sess:
        sess[OAUTH_STATE_SESSION_KEY] = "expected"
    response = client.get("/auth/callback?state=forged&code=abc")
    assert response.status_code == 400


def test_me_and_profile(client, login, alice):
    login(alice)
    assert client.get("/auth/me").get_json()["display_name"] == "Alice"

    response = client.put("/auth/profile", json={"first_name": "Ali"})
    assert response.status_code == 200
    assert client.get("/auth/me").get_json()["display_name"] == "Ali"

    assert client.put("/auth/profile", json={"first_name": ""}).status_code == 400


def test_party_flow(client, login, alice, bob):
    login(alice)
    response = client.post("/parties/", json={"name": "Watch Party"})
    assert response.status_code == 201
    party = response.get_json()
    assert party["member_count"] == 1

    assert client.post("/parties/", json={"name": ""}).status_code == 400

    login(bob)
    joined = client.post("/parties/join", json={"invite_code": party["invite_code"].lower()})
    assert joined.status_code == 200
    assert joined.get_json()["member_count"] == 2

    bad = client.post("/parties/join", json={"invite_code": "bad-code"})
    assert bad.status_code == 404
    assert bad.get_json()["code"] == "InvalidInviteCode"

    overlong = client.post("/parties/join", json={"invite_code": "X" * 30})
    assert overlong.status_code == 404
    assert overlong.get_json()["code"] == "InvalidInviteCode"

    client.post("/picks/winner", json={"option": "seahawks"})
    board = client.get(f"/parties/{party['id']}/leaderboard").get_json()
    assert [e["user_id"] for e in board["entries"]] == [bob.id, alice.id]
    assert board["my_rank"] == 1

    assert client.delete(f"/parties/{party['id']}/membership").get_json()["left"] is True
    assert client.get(f"/parties/{party['id']}/leaderboard").status_code == 403


def test_pick_toggle_and_lockout(client, login, alice, clock):
    login(alice)

    first = client.post("/picks/winner", json={"option": "seahawks"}).get_json()
    assert first["selection"] == "seahawks"

    second = client.post("/picks/winner", json={"option": "seahawks"}).get_json()
    assert second["selection"] is None
    assert second["predictions"] == {}

    assert client.post("/picks/winner", json={"option": "cowboys"}).status_code == 400
    assert client.post("/picks/nope", json={"option": "x"}).status_code == 400

    client.post("/picks/mvp", json={"option": "geno-smith"})
    summary = client.get("/picks/").get_json()["summary"]
    assert summary == {"score": 0, "picks": 1, "results_announced": 0, "categories": 15}

    clock.now = LOCKOUT_TIME
    locked = client.post("/picks/mvp", json={"option": "drake-maye"})
    assert locked.status_code == 403
    assert locked.get_json()["code"] == "PredictionsLocked"


def test_results_admin_gate(client, login, alice, admin):
    login(alice)
    assert client.put("/results/winner", json={"option": "seahawks"}).status_code == 403
    assert client.post("/results/admin/login", json={"password": "wrong"}).status_code == 403

    # The password alone is not enough without the verified admin role
    assert client.post("/results/admin/login", json={"password": "test-admin"}).status_code == 200
    denied = client.put("/results/winner", json={"option": "seahawks"})
    assert denied.status_code == 403
    assert denied.get_json()["code"] == "AdminRequired"

    login(admin)
    client.post("/results/admin/login", json={"password": "test-admin"})
    assert client.put("/results/winner", json={"option": "seahawks"}).status_code == 200
    assert client.get("/results/").get_json()["results"] == {"winner": "seahawks"}

    overview = client.get("/results/admin/overview").get_json()
    assert overview["results_entered"] == 1
    assert overview["categories"] == 15

    assert client.delete("/results/winner").get_json()["cleared"] is True
    assert client.get("/results/").get_json()["results"] == {}


def test_global_leaderboard_and_anonymized_overview(client, login, alice, bob, admin):
    login(alice)
    client.post("/picks/winner", json={"option": "seahawks"})
    login(bob)
    client.post("/picks/winner", json={"option": "patriots"})
    client.post("/picks/mvp", json={"option": "drake-maye"})

    login(admin)
    client.post("/results/admin/login", json={"password": "test-admin"})
    client.put("/results/winner", json={"option": "seahawks"})

    board = client.get("/leaderboard").get_json()
    assert [(e["user_id"], e["score"], e["total"]) for e in board["entries"]] == [
        (alice.id, 1, 1),
        (bob.id, 0, 2),
    ]
    assert board["my_rank"] is None

    players = [row["player"] for row in client.get("/results/admin/overview").get_json()["leaderboard"]]
    assert players == ["alice...", "bob..."]
