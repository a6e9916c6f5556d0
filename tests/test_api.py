import server
from leaderboard import LeaderboardStore


def score(username, wpm, won=True, date="01/01/2026"):
    return {"username": username, "wpm": wpm, "date": date, "won": won}


# ============================================================
#  Leaderboard + admin endpoints
# ============================================================


def test_empty_leaderboard(client):
    r = client.get("/api/leaderboard")
    assert r.status_code == 200
    assert r.json() == []


def test_save_then_read_sorted(client):
    r = client.post("/api/leaderboard", json=[score("ana", 40), score("bo", 75)])
    assert r.json() == {"success": True}
    assert [e["username"] for e in client.get("/api/leaderboard").json()] == ["bo", "ana"]


def test_save_twice_gives_same_board(client):
    rows = [score("ana", 40), score("bo", 75), score("cy", 75, won=False)]
    client.post("/api/leaderboard", json=rows)
    first = client.get("/api/leaderboard").json()
    client.post("/api/leaderboard", json=first)
    assert client.get("/api/leaderboard").json() == first


def test_save_rejects_non_array(client):
    r = client.post("/api/leaderboard", json={"username": "ana"})
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid leaderboard data"}


def test_save_rejects_bad_entries(client):
    r = client.post("/api/leaderboard", json=[score("ana", -3)])
    assert r.status_code == 400


def test_save_reports_unpersisted_write(client, monkeypatch, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    monkeypatch.setattr(server, "STORE", LeaderboardStore(blocker / "leaderboard.json"))

    r = client.post("/api/leaderboard", json=[score("ana", 40)])
    assert r.status_code == 200
    assert r.json()["success"] is True
    assert "warning" in r.json()

    r = client.delete("/api/leaderboard/reset")
    assert r.json()["success"] is True
    assert "warning" in r.json()


def test_check_username(client):
    client.post("/api/leaderboard", json=[score("Ana", 40)])
    assert client.get("/api/leaderboard", params={"checkUsername": "ANA"}).json() == {"exists": True}
    assert client.get("/api/leaderboard", params={"checkUsername": "bo"}).json() == {"exists": False}


def test_reset(client):
    client.post("/api/leaderboard", json=[score("ana", 40)])
    r = client.delete("/api/leaderboard/reset")
    assert r.json() == {"success": True}
    assert client.get("/api/leaderboard").json() == []


def test_admin_auth(client):
    ok = client.post("/api/admin/auth", json={"password": "typerace2023"}).json()
    assert ok["success"] is True

    bad = client.post("/api/admin/auth", json={"password": "nope"}).json()
    assert bad == {"success": False, "message": "Invalid password"}

    r = client.post("/api/admin/auth", json={})
    assert r.status_code == 400
    assert r.json()["success"] is False


# ============================================================
#  Sessions / races
# ============================================================


def test_session_rejects_taken_name(client):
    client.post("/api/leaderboard", json=[score("Ana", 40)])
    r = client.post("/api/session", json={"username": "ana"})
    assert r.status_code == 409
    assert client.post("/api/session", json={"username": " "}).status_code == 400


def test_unknown_session(client):
    assert client.get("/api/session/nope").status_code == 404
    assert client.post("/api/session/nope/race").status_code == 404


def test_race_before_prepare(client):
    sid = client.post("/api/session", json={"username": "Ana"}).json()["id"]
    assert client.get(f"/api/session/{sid}/race").status_code == 409


def test_full_race_flow(client, fake_clock):
    view = client.post("/api/session", json={"username": "Ana"}).json()
    sid = view["id"]
    assert view["attempts"] == 1
    assert view["race"] is None

    view = client.post(f"/api/session/{sid}/race").json()
    sentence = view["race"]["sentence"]
    assert view["race"]["status"] == "ready"
    assert view["pace"]["source"] == "Estimate"

    race = client.post(f"/api/session/{sid}/race/input", json={"text": sentence[:1]}).json()
    assert race["status"] == "running"

    fake_clock.tick(8.0)
    race = client.post(f"/api/session/{sid}/race/input", json={"text": sentence}).json()
    assert race["wpm"] == 120
    assert race["participants"][0]["finished"] is True

    fake_clock.tick(2.0)
    race = client.get(f"/api/session/{sid}/race").json()
    assert race["status"] == "finished"
    assert race["won"] is True

    view = client.get(f"/api/session/{sid}").json()
    assert view["best_wpm"] == 120

    board = client.post(f"/api/session/{sid}/finish").json()["leaderboard"]
    assert board == [{"username": "Ana", "wpm": 120, "date": board[0]["date"], "won": True}]

    assert client.delete(f"/api/session/{sid}").json() == {"ok": True}
    assert client.get(f"/api/session/{sid}").status_code == 404


def test_fourth_race_shows_leaderboard(client, fake_clock):
    sid = client.post("/api/session", json={"username": "Bo"}).json()["id"]
    for _ in range(3):
        view = client.post(f"/api/session/{sid}/race").json()
        sentence = view["race"]["sentence"]
        client.post(f"/api/session/{sid}/race/input", json={"text": sentence[:1]})
        fake_clock.tick(10.0)
        client.post(f"/api/session/{sid}/race/input", json={"text": sentence})
        fake_clock.tick(2.0)
        client.get(f"/api/session/{sid}/race")

    view = client.post(f"/api/session/{sid}/race").json()
    assert view["attempts"] == 3
    assert view["showing_leaderboard"] is True
    assert [e["username"] for e in view["leaderboard"]] == ["Bo"]


def test_pages(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "TypeRace" in r.text
    assert "Admin Access" in client.get("/admin").text
