import re

from pages import ADMIN_HTML, GAME_HTML

# innerHTML may only be cleared or set to a fixed literal
CONSTANT_ASSIGN = re.compile(r"\.innerHTML\s*=\s*'[^'+]*';")


def _inner_html_lines(html):
    return [line.strip() for line in html.splitlines() if ".innerHTML" in line]


def test_game_page_never_builds_markup_from_data():
    for line in _inner_html_lines(GAME_HTML):
        assert CONSTANT_ASSIGN.search(line), line


def test_admin_page_never_builds_markup_from_data():
    for line in _inner_html_lines(ADMIN_HTML):
        assert CONSTANT_ASSIGN.search(line), line


def test_names_are_rendered_as_text():
    assert "name.textContent = p.name;" in GAME_HTML
    assert "td.textContent = value;" in GAME_HTML
    assert "td.textContent = value;" in ADMIN_HTML


def test_stored_script_name_is_served_as_json_only(client):
    name = "<script>alert(1)</script>"
    client.post("/api/leaderboard", json=[{"username": name, "wpm": 10, "date": "x", "won": True}])
    r = client.get("/api/leaderboard")
    assert r.headers["content-type"].startswith("application/json")
    assert r.json()[0]["username"] == name
    assert name not in client.get("/").text
