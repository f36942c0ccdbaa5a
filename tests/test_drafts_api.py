import json
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import OperationalError

from app.models.draft import Draft
from app.services.draft_service import default_draft_name, format_draft_date
from app.core.catalog import get_product

API = "/api/v1"


def _select(client, product_id="nfc-business-card"):
    client.put(f"{API}/workspace/product", json={"product_id": product_id})


def _set(client, field, value):
    client.post(
        f"{API}/workspace/commands",
        json={"command": {"type": "set_field", "field": field, "value": value}},
    )


def _legacy_draft(session, user, **customization) -> Draft:
    now = datetime.now(timezone.utc)
    draft = Draft(
        user_id=user.id,
        product_id="nfc-business-card",
        product_name="NFC Business Card",
        customization=customization,
        name="Old design",
        created_at=now,
        updated_at=now,
    )
    session.add(draft)
    session.commit()
    session.refresh(draft)
    return draft


def test_default_name_uses_creation_date():
    moment = datetime(2026, 10, 8, 15, 30, tzinfo=timezone.utc)

    assert format_draft_date(moment) == "Oct 8, 2026"
    assert default_draft_name(get_product("nfc-sticker"), moment) == "NFC Sticker - Oct 8, 2026"


def test_save_draft_from_workspace(client):
    _select(client)
    _set(client, "name", "Ada")

    res = client.post(f"{API}/drafts", json={})

    assert res.status_code == 201
    body = res.json()
    assert body["product_id"] == "nfc-business-card"
    assert body["product_name"] == "NFC Business Card"
    assert body["name"].startswith("NFC Business Card - ")
    assert body["customization"]["front"]["name"] == "Ada"
    assert body["legacy"] is False
    assert body["swatch_color"] == "#1a1a2e"


def test_save_draft_with_explicit_design(client):
    res = client.post(
        f"{API}/drafts",
        json={
            "product_id": "nfc-sticker",
            "customization": {"front": {"backgroundColor": "#00ff00"}},
            "name": "  Green sticker  ",
        },
    )

    assert res.status_code == 201
    body = res.json()
    assert body["name"] == "Green sticker"
    assert body["swatch_color"] == "#00ff00"


def test_save_requires_a_product(client):
    res = client.post(f"{API}/drafts", json={})

    assert res.status_code == 400


def test_save_always_creates_new_rows(client):
    _select(client)

    a = client.post(f"{API}/drafts", json={}).json()
    b = client.post(f"{API}/drafts", json={}).json()

    assert a["id"] != b["id"]
    assert len(client.get(f"{API}/drafts").json()) == 2


def test_list_is_newest_first(client, session, user):
    old = _legacy_draft(session, user, name="old")
    old.updated_at = datetime.now(timezone.utc) - timedelta(days=3)
    session.add(old)
    session.commit()
    _select(client)
    newest = client.post(f"{API}/drafts", json={"name": "new"}).json()

    ids = [d["id"] for d in client.get(f"{API}/drafts").json()]

    assert ids == [newest["id"], str(old.id)]


def test_update_overwrites_in_place(client):
    _select(client)
    saved = client.post(f"{API}/drafts", json={"name": "Mine"}).json()
    _set(client, "title", "CTO")

    res = client.put(f"{API}/drafts/{saved['id']}", json={})

    assert res.status_code == 200
    body = res.json()
    assert body["id"] == saved["id"]
    assert body["name"] == "Mine"
    assert body["customization"]["front"]["title"] == "CTO"
    assert len(client.get(f"{API}/drafts").json()) == 1


def test_update_keeps_product(client):
    _select(client)
    saved = client.post(f"{API}/drafts", json={}).json()
    _select(client, "nfc-sticker")

    res = client.put(
        f"{API}/drafts/{saved['id']}",
        json={"name": "Renamed", "customization": {"front": {"name": "Ada"}}},
    )

    assert res.status_code == 200
    body = res.json()
    assert body["product_id"] == "nfc-business-card"
    assert body["name"] == "Renamed"
    assert body["customization"]["front"]["name"] == "Ada"


def test_update_from_workspace_on_another_product_is_rejected(client):
    _select(client, "nfc-sticker")
    _set(client, "name", "STICKER")
    saved = client.post(f"{API}/drafts", json={}).json()
    _select(client)
    _set(client, "name", "CARD DESIGN")

    res = client.put(f"{API}/drafts/{saved['id']}", json={})

    assert res.status_code == 400
    assert res.json()["detail"] == "Load this draft before updating it"
    stored = client.get(f"{API}/drafts/{saved['id']}").json()
    assert stored["product_id"] == "nfc-sticker"
    assert stored["customization"]["front"]["name"] == "STICKER"


def test_update_after_loading_the_draft(client):
    _select(client, "nfc-sticker")
    saved = client.post(f"{API}/drafts", json={}).json()
    _select(client)

    client.post(f"{API}/drafts/{saved['id']}/load")
    _set(client, "name", "Edited")
    res = client.put(f"{API}/drafts/{saved['id']}", json={})

    assert res.status_code == 200
    assert res.json()["customization"]["front"]["name"] == "Edited"


def test_save_for_another_product_needs_a_design(client):
    _select(client)
    _set(client, "name", "CARD DESIGN")

    res = client.post(f"{API}/drafts", json={"product_id": "nfc-sticker"})

    assert res.status_code == 400
    assert client.get(f"{API}/drafts").json() == []


def test_legacy_draft_is_migrated_on_read(client, session, user):
    draft = _legacy_draft(session, user, backgroundColor="#111111", name="Jane")

    body = client.get(f"{API}/drafts/{draft.id}").json()

    assert body["legacy"] is True
    assert body["swatch_color"] == "#111111"
    assert body["customization"]["front"]["backgroundColor"] == "#111111"
    assert body["customization"]["front"]["name"] == "Jane"
    assert body["customization"]["front"]["pattern"] == "none"
    assert body["customization"]["back"]["showQRCode"] is True


def test_current_format_stored_as_json_string_is_not_legacy(client, session, user):
    draft = _legacy_draft(session, user)
    draft.customization = json.dumps(
        {"front": {"backgroundColor": "#123456", "name": "Ada"}, "activeSide": "front"}
    )
    session.add(draft)
    session.commit()

    body = client.get(f"{API}/drafts/{draft.id}").json()

    assert body["legacy"] is False
    assert body["swatch_color"] == "#123456"
    assert body["customization"]["front"]["name"] == "Ada"


def test_load_draft_replaces_workspace(client, session, user):
    draft = _legacy_draft(session, user, name="Jane")
    _select(client, "nfc-sticker")

    res = client.post(f"{API}/drafts/{draft.id}/load")

    assert res.status_code == 200
    body = res.json()
    assert body["product"]["id"] == "nfc-business-card"
    assert body["customization"]["front"]["name"] == "Jane"
    assert client.get(f"{API}/workspace").json()["customization"]["front"]["name"] == "Jane"


def test_corrupt_draft_loads_as_defaults(client, session, user):
    draft = _legacy_draft(session, user)
    draft.customization = "not an object"
    session.add(draft)
    session.commit()

    body = client.post(f"{API}/drafts/{draft.id}/load").json()

    assert body["customization"]["front"]["name"] == ""
    assert body["customization"]["activeSide"] == "front"


def test_delete_draft(client):
    _select(client)
    saved = client.post(f"{API}/drafts", json={}).json()

    assert client.delete(f"{API}/drafts/{saved['id']}").status_code == 204
    assert client.get(f"{API}/drafts/{saved['id']}").status_code == 404


def test_drafts_are_owner_scoped(client, session, admin):
    draft = _legacy_draft(session, admin, name="Theirs")

    assert client.get(f"{API}/drafts/{draft.id}").status_code == 404
    assert client.put(f"{API}/drafts/{draft.id}", json={}).status_code == 404
    assert client.delete(f"{API}/drafts/{draft.id}").status_code == 404
    assert client.post(f"{API}/drafts/{draft.id}/load").status_code == 404
    assert client.get(f"{API}/drafts").json() == []


def test_unknown_draft(client):
    assert client.get(f"{API}/drafts/{uuid.uuid4()}").status_code == 404


def test_store_failure_is_retryable(client, session, monkeypatch):
    _select(client)
    _set(client, "name", "Ada")

    def _fail():
        raise OperationalError("INSERT", {}, Exception("connection lost"))

    with monkeypatch.context() as m:
        m.setattr(session, "commit", _fail)
        res = client.post(f"{API}/drafts", json={})

    assert res.status_code == 503
    # workspace untouched and the save can be retried
    assert client.get(f"{API}/workspace").json()["customization"]["front"]["name"] == "Ada"
    assert client.post(f"{API}/drafts", json={}).status_code == 201


def test_guests_cannot_use_drafts(client, auth_as):
    auth_as(None)

    assert client.get(f"{API}/drafts").status_code == 401
    assert client.post(f"{API}/drafts", json={}).status_code == 401
