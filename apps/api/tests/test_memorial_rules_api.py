from temple_api.modules.memorial_rules.service import get_default_rule
from temple_api import seed


def test_only_one_default_rule_at_a_time(client):
    a = client.post("/memorial_rules", json={"name": "標準年忌", "years": [1, 3, 7], "set_default": True})
    assert a.status_code == 201
    assert a.json()["is_default"] is True

    b = client.post("/memorial_rules", json={"name": "簡易", "years": [1, 3], "set_default": True}).json()

    assert client.get(f"/memorial_rules/{a.json()['id']}").json()["is_default"] is False
    assert get_default_rule()["id"] == b["id"]

    listed = client.get("/memorial_rules").json()
    assert listed["page"]["total"] == 2
    assert [r["is_default"] for r in listed["items"]] == [True, False]


def test_patch_rule_years_and_default(client):
    a = client.post("/memorial_rules", json={"name": "標準年忌", "years": [1, 3, 7]}).json()
    assert a["is_default"] is False
    assert a["years"] == [1, 3, 7]

    r = client.patch(f"/memorial_rules/{a['id']}", json={"years": [1, 3, 7, 13], "set_default": True})
    assert r.status_code == 200
    assert r.json()["years"] == [1, 3, 7, 13]
    assert r.json()["is_default"] is True

    off = client.patch(f"/memorial_rules/{a['id']}", json={"set_default": False}).json()
    assert off["is_default"] is False
    assert get_default_rule() is None


def test_rule_years_are_validated(client):
    for years in ([], [0, 1], [1, 1]):
        r = client.post("/memorial_rules", json={"name": "bad", "years": years})
        assert r.status_code == 422, years


def test_missing_rule_is_404(client):
    assert client.get("/memorial_rules/nope").status_code == 404
    assert client.patch("/memorial_rules/nope", json={"name": "x"}).status_code == 404


def test_seed_is_idempotent(pin_today):
    from datetime import date

    pin_today(date(2025, 5, 1))
    seed.main()
    seed.main()

    rule = get_default_rule()
    assert rule["id"] == seed.DEFAULT_RULE_ID
    assert rule["years"] == [1, 3, 7, 13, 17, 23, 27, 33, 50]
