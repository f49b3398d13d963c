from datetime import date

from temple_api.core.errors import PersistenceError
from temple_api.modules.memorial import service as memorial_service


def _payload(household_id, **over):
    body = {
        "household_id": household_id,
        "last_name": "山田",
        "first_name": "太郎",
        "posthumous_name": "釋淨光居士",
        "death_date": "2024-06-15",
    }
    body.update(over)
    return body


def test_create_generates_memorial_instances(client, add_rule, household_id, pin_today):
    pin_today(date(2025, 5, 1))
    add_rule()

    r = client.post("/deceased", json=_payload(household_id))

    assert r.status_code == 201
    body = r.json()
    assert body["death_date"] == "2024-06-15"
    assert [(m["year"], m["due_date"]) for m in body["memorial_instances"]] == [(1, "2025-06-15")]


def test_create_succeeds_without_default_rule(client, household_id, capsys, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    r = client.post("/deceased", json=_payload(household_id))

    assert r.status_code == 201
    assert r.json()["memorial_instances"] == []
    assert "memorial.regenerate.failed" in capsys.readouterr().out


def test_create_with_unknown_household_is_404(client, add_rule):
    add_rule()
    r = client.post("/deceased", json=_payload("missing-household"))
    assert r.status_code == 404
    assert r.json()["message"] == "household not found"


def test_create_validates_required_fields(client, household_id):
    r = client.post("/deceased", json=_payload(household_id, last_name="", death_date="not-a-date"))
    assert r.status_code == 422
    assert r.json()["error"] == "validation_error"


def test_create_rejects_future_death_date(client, add_rule, household_id):
    add_rule()
    r = client.post("/deceased", json=_payload(household_id, death_date="2099-01-01"))

    assert r.status_code == 422
    body = r.json()
    assert body["error"] == "validation_error"
    assert "future" in body["details"][0]["msg"]
    assert client.get("/deceased").json()["items"] == []


def test_patch_rejects_future_death_date(client, add_rule, household_id, pin_today):
    pin_today(date(2025, 5, 1))
    add_rule()
    created = client.post("/deceased", json=_payload(household_id)).json()

    r = client.patch(f"/deceased/{created['id']}", json={"death_date": "2099-01-01"})

    assert r.status_code == 422
    assert r.json()["error"] == "validation_error"
    assert client.get(f"/deceased/{created['id']}").json()["death_date"] == "2024-06-15"


def test_death_date_edit_moves_pending_instances(client, add_rule, household_id, pin_today):
    pin_today(date(2025, 5, 1))
    add_rule()
    created = client.post("/deceased", json=_payload(household_id)).json()
    [before] = created["memorial_instances"]

    r = client.patch(f"/deceased/{created['id']}", json={"death_date": "2024-07-01"})

    assert r.status_code == 200
    [after] = r.json()["memorial_instances"]
    assert after["id"] == before["id"]
    assert after["due_date"] == "2025-07-01"


def test_edit_without_death_date_does_not_regenerate(client, add_rule, household_id, pin_today, monkeypatch):
    pin_today(date(2025, 5, 1))
    add_rule()
    created = client.post("/deceased", json=_payload(household_id)).json()

    calls = []
    monkeypatch.setattr(memorial_service, "generate_memorial_instances", lambda **kw: calls.append(kw))

    r = client.patch(f"/deceased/{created['id']}", json={"notes": "墓所: 第3区"})

    assert r.status_code == 200
    assert r.json()["notes"] == "墓所: 第3区"
    assert calls == []


def test_regeneration_failure_does_not_fail_edit(client, add_rule, household_id, pin_today, monkeypatch):
    pin_today(date(2025, 5, 1))
    add_rule()
    created = client.post("/deceased", json=_payload(household_id)).json()

    def boom(**kw):
        raise PersistenceError("database is locked", retryable=True)

    monkeypatch.setattr(memorial_service, "generate_memorial_instances", boom)

    r = client.patch(f"/deceased/{created['id']}", json={"death_date": "2024-07-01"})

    assert r.status_code == 200
    assert r.json()["death_date"] == "2024-07-01"
    assert r.json()["memorial_instances"][0]["due_date"] == "2025-06-15"


def test_list_filters(client, add_rule, household_id, add_deceased):
    add_rule()
    add_deceased(date(2020, 1, 5), last_name="山田", first_name="一郎")
    add_deceased(date(2023, 3, 9), last_name="鈴木", first_name="花子")

    all_items = client.get("/deceased").json()
    assert all_items["page"] == {"limit": 50, "offset": 0, "total": 2, "has_more": False}
    assert [i["last_name"] for i in all_items["items"]] == ["鈴木", "山田"]

    q = client.get("/deceased", params={"q": "花"}).json()["items"]
    assert [i["first_name"] for i in q] == ["花子"]

    by_household = client.get("/deceased", params={"household_id": household_id}).json()
    assert by_household["page"]["total"] == 2

    paged = client.get("/deceased", params={"limit": 1}).json()
    assert paged["page"]["has_more"] is True
    assert len(paged["items"]) == 1


def test_get_missing_deceased_is_404(client):
    r = client.get("/deceased/unknown")
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"
