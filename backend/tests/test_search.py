import inspect

from conftest import category, policy, write_content

from handbook.core.content import FileContentSource, get_content_source
from handbook.api.search import search_handbook
from handbook.main import app

SEARCH_URL = "/api/HandbookSearch/Search"


class ExplodingSource:
    def snapshot(self):
        raise AssertionError("content source should not be read")


def search(client, q, **params):
    params["q"] = q
    return client.get(SEARCH_URL, params=params)


def test_short_query_returns_empty_without_reading_content(client):
    app.dependency_overrides[get_content_source] = lambda: ExplodingSource()

    for q in ["a", " b ", ""]:
        r = search(client, q)
        assert r.status_code == 200
        assert r.json() == []


def test_missing_query_returns_empty(client):
    r = client.get(SEARCH_URL)
    assert r.status_code == 200
    assert r.json() == []


def test_policies_come_before_categories(client):
    r = search(client, "leave")
    assert r.status_code == 200
    body = r.json()

    assert [item["type"] for item in body] == ["policy", "category"]
    assert body[0] == {
        "id": 101,
        "title": "Annual Leave",
        "description": "How to request leave",
        "url": "/people/",
        "categoryUrl": "/people/",
        "category": "Policy",
        "type": "policy",
    }
    assert body[1] == {
        "title": "People",
        "description": "Leave, benefits and conduct",
        "url": "/people/",
        "category": "Category",
        "type": "category",
    }


def test_search_is_case_insensitive(client):
    assert [item.get("id") for item in search(client, "ANNUAL").json()] == [101]


def test_matches_stripped_summary_not_markup(client):
    assert [item["id"] for item in search(client, "to request").json()] == [101]
    assert search(client, "<b>").json() == []


def test_matches_body_text(client):
    body = search(client, "accrue").json()
    assert [item["id"] for item in body] == [101]
    # Summary wins over body for the description
    assert body[0]["description"] == "How to request leave"


def test_short_body_used_as_description(client):
    body = search(client, "three four").json()
    assert len(body) == 1
    assert body[0]["id"] == 102
    assert body[0]["description"] == "one two three four five"


def test_long_body_description_is_truncated(client):
    words = [f"word{i}" for i in range(60)]
    write_content([category(1, "Long", children=[policy(5, "Long Policy", body=" ".join(words))])])

    body = search(client, "word59").json()
    assert body[0]["description"] == " ".join(words[:40]) + "…"


def test_category_description_match(client):
    body = search(client, "travel").json()
    assert body == [{
        "title": "Finance",
        "description": "Expenses and travel",
        "url": "/finance/",
        "category": "Category",
        "type": "category",
    }]


def test_policy_without_parent_uses_own_url(client):
    write_content([policy(7, "Orphan Policy", url="/orphan/")])

    body = search(client, "orphan").json()
    assert body[0]["url"] == "/orphan/"
    assert "categoryUrl" not in body[0]


def test_no_matches_returns_empty(client):
    r = search(client, "zzzz-nothing")
    assert r.status_code == 200
    assert r.json() == []


def test_take_is_clamped(client):
    policies = [policy(1000 + i, f"Travel policy {i}") for i in range(60)]
    write_content([category(1, "Travel", children=policies)])

    assert len(search(client, "travel", take=100).json()) == 50
    assert len(search(client, "travel", take=0).json()) == 1
    assert len(search(client, "travel", take=-3).json()) == 1
    assert len(search(client, "travel", take=5).json()) == 5


def test_combined_results_truncated_to_take(client):
    body = search(client, "leave", take=1).json()
    assert len(body) == 1
    assert body[0]["type"] == "policy"


def test_results_follow_tree_order(client):
    body = search(client, "expenses").json()
    assert [item["type"] for item in body] == ["policy", "category"]
    assert body[0]["id"] == 201


def test_invalid_take_is_rejected(client):
    r = search(client, "leave", take="many")
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_unavailable_content_returns_empty(client, tmp_path):
    missing = tmp_path / "missing.json"
    app.dependency_overrides[get_content_source] = lambda: FileContentSource(str(missing))

    r = search(client, "leave")
    assert r.status_code == 200
    assert r.json() == []


def test_unconfigured_content_returns_empty(client):
    app.dependency_overrides[get_content_source] = lambda: None

    r = search(client, "leave")
    assert r.status_code == 200
    assert r.json() == []


def test_malformed_content_is_server_error(client, tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text('[{"name": "no id or type"}]', encoding="utf-8")
    app.dependency_overrides[get_content_source] = lambda: FileContentSource(str(broken))

    r = search(client, "leave")
    assert r.status_code == 500
    assert r.json() == {"success": False, "message": "Internal server error"}


def test_search_handler_runs_in_threadpool():
    # Blocking content reads must not run on the event loop
    assert not inspect.iscoroutinefunction(search_handbook)
