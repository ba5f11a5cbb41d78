import uuid

import pytest

from contactbook.db import models


def _h(email):
    return {"x-auth-request-user": email.split("@")[0], "x-auth-request-email": email}


def _email(prefix="ct"):
    return f"{prefix}_{uuid.uuid4().hex[:8]}@example.com"


def _create(client, headers, **fields):
    payload = {"name": "Ana García", "phone": "5512345678", "email": "ana@example.com", "birthday": "1990-03-15"}
    payload.update(fields)
    r = client.post("/contacts/", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()["contact"]


def test_create_returns_contact_and_success_toast(client):
    headers = _h(_email())
    r = client.post(
        "/contacts/",
        json={"name": "  Ana García ", "phone": "5512345678", "email": "ana@example.com", "birthday": "1990-03-15"},
        headers=headers,
    )
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Contact Ana García created successfully."
    assert body["toast"] == {"level": "success", "message": body["message"], "duration_ms": 3000}
    assert body["contact"]["name"] == "Ana García"
    assert body["contact"]["birthday"] == "1990-03-15"
    assert isinstance(body["contact"]["id"], int)


def test_create_stores_blank_optional_fields_as_null(client, db_session):
    headers = _h(_email())
    contact = _create(client, headers, phone="", email="   ", birthday="")
    stored = db_session.get(models.Contact, contact["id"])
    assert stored.phone is None
    assert stored.email is None
    assert stored.birthday is None


def test_create_collects_validation_errors(client):
    r = client.post(
        "/contacts/",
        json={"name": " ", "phone": "12ab", "email": "not-an-email"},
        headers=_h(_email()),
    )
    assert r.status_code == 422
    detail = r.json()["detail"]
    assert detail.splitlines() == [
        "Name is required",
        "Invalid email format",
        "Please enter a valid phone number (7 to 15 digits).",
    ]


def test_writes_without_session_are_rejected(client):
    r = client.post("/contacts/", json={"name": "Nobody"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Session not valid"
    assert client.put("/contacts/1", json={"name": "x"}).status_code == 401
    assert client.delete("/contacts/1").status_code == 401


def test_reads_without_session_are_rejected(client):
    r = client.get("/contacts/")
    assert r.status_code == 401
    assert r.json()["detail"] == "Session not valid"


def test_wrong_method_is_not_allowed(client):
    r = client.patch("/contacts/1", json={"name": "x"}, headers=_h(_email()))
    assert r.status_code == 405


def test_list_is_scoped_to_owner(client):
    alice, bob = _h(_email("alice")), _h(_email("bob"))
    _create(client, alice, name="Alice Friend")
    _create(client, bob, name="Bob Friend")

    r = client.get("/contacts/", headers=alice)
    assert r.status_code == 200
    body = r.json()
    assert [c["name"] for c in body["items"]] == ["Alice Friend"]
    assert body["total"] == 1
    assert body["filters_active"] is False
    assert body["message"] is None


def test_empty_list_has_message(client):
    r = client.get("/contacts/", headers=_h(_email()))
    assert r.status_code == 200
    assert r.json() == {"items": [], "total": 0, "filters_active": False, "message": "No contacts found."}


def test_search_filter_and_sort(client):
    headers = _h(_email())
    _create(client, headers, name="Luis Pérez", phone="5587654321", email="luis@example.com", birthday="1985-11-20")
    _create(client, headers, name="María López", phone="5599999999", email="maria@example.com", birthday="1990-03-15")
    _create(client, headers, name="Ana García", phone="5512345678", email="ana@example.com", birthday="1990-03-15")
    _create(client, headers, name="Javier Domínguez", phone="", email="javier@example.com", birthday="")

    r = client.get("/contacts/", params={"sort": "name"}, headers=headers)
    assert [c["name"] for c in r.json()["items"]] == ["Ana García", "Javier Domínguez", "Luis Pérez", "María López"]

    r = client.get("/contacts/", params={"sort": "birthday"}, headers=headers)
    assert [c["name"] for c in r.json()["items"]] == ["Javier Domínguez", "Luis Pérez", "María López", "Ana García"]

    r = client.get("/contacts/", params={"q": "9999"}, headers=headers)
    body = r.json()
    assert [c["name"] for c in body["items"]] == ["María López"]
    assert body["filters_active"] is True

    # Contacts without a birthday pass date filters
    r = client.get("/contacts/", params={"day": "15", "month": "Mar", "sort": "name"}, headers=headers)
    assert [c["name"] for c in r.json()["items"]] == ["Ana García", "Javier Domínguez", "María López"]

    r = client.get("/contacts/", params={"year": "1985"}, headers=headers)
    assert [c["name"] for c in r.json()["items"]] == ["Luis Pérez", "Javier Domínguez"]


def test_invalid_date_filters_are_rejected(client):
    headers = _h(_email())
    _create(client, headers)
    r = client.get("/contacts/", params={"day": "32", "year": "19"}, headers=headers)
    assert r.status_code == 422
    lines = r.json()["detail"].splitlines()
    assert lines[0] == "Invalid date filters. Please correct them."
    assert len(lines) == 3


def test_birthday_filters_can_be_disabled(client, monkeypatch):
    from contactbook.utils.feature_flags import refresh_feature_flag_cache

    monkeypatch.setenv("FEATURE_BIRTHDAY_FILTERS_ENABLED", "false")
    refresh_feature_flag_cache()
    headers = _h(_email())
    _create(client, headers, birthday="1990-03-15")
    r = client.get("/contacts/", params={"day": "99"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["total"] == 1


def test_get_contact_hides_other_owners(client):
    owner, other = _h(_email("own")), _h(_email("oth"))
    contact = _create(client, owner)

    r = client.get(f"/contacts/{contact['id']}", headers=owner)
    assert r.status_code == 200
    assert r.json()["email"] == "ana@example.com"

    r = client.get(f"/contacts/{contact['id']}", headers=other)
    assert r.status_code == 404
    assert r.json()["detail"] == "Contact not found"


def test_update_replaces_all_fields(client):
    headers = _h(_email())
    contact = _create(client, headers)
    r = client.put(
        f"/contacts/{contact['id']}",
        json={"name": "Ana G.", "phone": "", "email": "new@example.com", "birthday": ""},
        headers=headers,
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["message"] == "Contact Ana G. updated."
    assert body["toast"]["level"] == "success"
    assert body["contact"]["name"] == "Ana G."
    assert body["contact"]["phone"] is None
    assert body["contact"]["email"] == "new@example.com"
    assert body["contact"]["birthday"] is None


def test_update_is_gated_by_ownership(client, db_session):
    owner, intruder = _h(_email("own")), _h(_email("intr"))
    contact = _create(client, owner, name="Original")

    r = client.put(f"/contacts/{contact['id']}", json={"name": "Hijacked"}, headers=intruder)
    assert r.status_code == 404
    assert r.json()["detail"] == "Contact not found or you do not have permission"

    db_session.expire_all()
    assert db_session.get(models.Contact, contact["id"]).name == "Original"


@pytest.mark.parametrize("payload,detail", [
    ({"name": ""}, "Name is required"),
    ({"name": "Ana", "email": "bad@"}, "Invalid email format"),
])
def test_update_validation(client, payload, detail):
    headers = _h(_email())
    contact = _create(client, headers)
    r = client.put(f"/contacts/{contact['id']}", json=payload, headers=headers)
    assert r.status_code == 422
    assert r.json()["detail"] == detail


def test_update_rejects_non_positive_id(client):
    r = client.put("/contacts/0", json={"name": "Ana"}, headers=_h(_email()))
    assert r.status_code == 422
    assert r.json()["detail"] == "Invalid contact id"


def test_update_missing_contact(client):
    r = client.put("/contacts/999", json={"name": "Ana"}, headers=_h(_email()))
    assert r.status_code == 404


def test_delete_contact(client):
    headers = _h(_email())
    contact = _create(client, headers, name="Luis Pérez")

    r = client.delete(f"/contacts/{contact['id']}", headers=_h(_email("other")))
    assert r.status_code == 404

    r = client.delete(f"/contacts/{contact['id']}", headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Contact Luis Pérez deleted."
    assert body["toast"]["level"] == "danger"
    assert body["contact"] is None

    assert client.get(f"/contacts/{contact['id']}", headers=headers).status_code == 404
    assert client.delete(f"/contacts/{contact['id']}", headers=headers).status_code == 404


def test_export_is_simulated(client):
    headers = _h(_email())
    _create(client, headers)
    _create(client, headers, name="Luis")
    r = client.post("/contacts/export", headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["exported"] == 2
    assert body["toast"]["level"] == "info"
    assert body["message"] == "CSV export finished."


def test_export_can_be_disabled(client, monkeypatch):
    from contactbook.utils.feature_flags import refresh_feature_flag_cache

    monkeypatch.setenv("FEATURE_CSV_EXPORT_ENABLED", "0")
    refresh_feature_flag_cache()
    r = client.post("/contacts/export", headers=_h(_email()))
    assert r.status_code == 404


def test_database_errors_are_not_leaked(client, monkeypatch):
    from sqlalchemy.exc import OperationalError, IntegrityError
    from contactbook.db.repositories import contacts as contact_repo

    headers = _h(_email())
    contact = _create(client, headers)

    def _broken_update(*args, **kwargs):
        raise IntegrityError("UPDATE contacts ...", {}, Exception("secret details"))

    monkeypatch.setattr(contact_repo, "update_contact", _broken_update)
    r = client.put(f"/contacts/{contact['id']}", json={"name": "Ana"}, headers=headers)
    assert r.status_code == 500
    assert r.json()["detail"] == "Error updating contact"

    def _no_connection(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(contact_repo, "list_contacts", _no_connection)
    r = client.get("/contacts/", headers=headers)
    assert r.status_code == 503
    assert r.json()["detail"] == "Database connection error"


def test_numeric_phone_is_accepted(client):
    r = client.post("/contacts/", json={"name": "Ana", "phone": 5512345678}, headers=_h(_email()))
    assert r.status_code == 201, r.text
    assert r.json()["contact"]["phone"] == "5512345678"


def test_get_contact_maps_database_errors(client, monkeypatch):
    from sqlalchemy.exc import OperationalError, SQLAlchemyError
    from contactbook.db.repositories import contacts as contact_repo

    headers = _h(_email())
    contact = _create(client, headers)

    def _no_connection(*args, **kwargs):
        raise OperationalError("SELECT contacts ...", {}, Exception("connection refused"))

    monkeypatch.setattr(contact_repo, "get_contact", _no_connection)
    r = client.get(f"/contacts/{contact['id']}", headers=headers)
    assert r.status_code == 503
    assert r.json()["detail"] == "Database connection error"

    def _broken(*args, **kwargs):
        raise SQLAlchemyError("secret details")

    monkeypatch.setattr(contact_repo, "get_contact", _broken)
    r = client.get(f"/contacts/{contact['id']}", headers=headers)
    assert r.status_code == 500
    assert r.json()["detail"] == "Error loading contact"


def test_update_of_contact_deleted_before_reread_is_not_found(client, monkeypatch):
    from contactbook.db.repositories import contacts as contact_repo

    headers = _h(_email())
    contact = _create(client, headers)
    monkeypatch.setattr(contact_repo, "get_contact", lambda *args, **kwargs: None)

    r = client.put(f"/contacts/{contact['id']}", json={"name": "Ana"}, headers=headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "Contact not found"
