from fastapi.testclient import TestClient

from app.core.config import settings
from app.main import app
from app.models.field import Field
from app.models.form import Form
from tests.helpers import (
    auth,
    create_field,
    create_form,
    create_user,
    field_configuration,
    select_options,
)


def _setup(db_session, locales=("en", "de")):
    user = create_user(db_session, "owner@test.com")
    form = create_form(db_session, user, locales=locales)
    return user, form


def test_create_text_field(db_session):
    _, form = _setup(db_session)
    client = TestClient(app)

    configuration = field_configuration(maxlength=50, placeholder={"en": "Your name"})
    r = client.post(
        f"/forms/{form.id}/fields",
        headers=auth("owner@test.com"),
        json={"type": "text", "configuration": configuration},
    )
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Field created successfully"
    data = body["data"]
    assert data["form_id"] == str(form.id)
    assert data["type"] == "text"
    assert data["order"] == 1
    assert data["configuration"] == configuration
    assert data["validation_rules"] is None

    r = client.get(f"/forms/{form.id}/fields/{data['id']}", headers=auth("owner@test.com"))
    assert r.status_code == 200
    assert r.json()["data"]["configuration"] == configuration


def test_create_select_without_options(db_session):
    _, form = _setup(db_session)
    client = TestClient(app)

    r = client.post(
        f"/forms/{form.id}/fields",
        headers=auth("owner@test.com"),
        json={"type": "select", "configuration": field_configuration(field_type="select", name="country")},
    )
    assert r.status_code == 422
    body = r.json()
    assert body["success"] is False
    assert body["errors"]["configuration.options"] == ["Options array is required for select/radio fields"]
    assert db_session.query(Field).count() == 0


def test_create_select_with_options(db_session):
    _, form = _setup(db_session)
    client = TestClient(app)

    configuration = field_configuration(field_type="select", name="country", options=select_options())
    r = client.post(
        f"/forms/{form.id}/fields",
        headers=auth("owner@test.com"),
        json={"type": "select", "configuration": configuration},
    )
    assert r.status_code == 201
    assert r.json()["data"]["configuration"]["options"][1]["label"] == {"en": "B (en)", "de": "B (de)"}


def test_create_number_min_greater_than_max(db_session):
    _, form = _setup(db_session)
    client = TestClient(app)

    r = client.post(
        f"/forms/{form.id}/fields",
        headers=auth("owner@test.com"),
        json={"type": "number", "configuration": field_configuration(field_type="number", name="age", min=100, max=50)},
    )
    assert r.status_code == 422
    assert r.json()["errors"] == {"configuration.min": ["min must be less than max"]}


def test_create_text_with_number_attribute(db_session):
    _, form = _setup(db_session)
    client = TestClient(app)

    r = client.post(
        f"/forms/{form.id}/fields",
        headers=auth("owner@test.com"),
        json={"type": "text", "configuration": field_configuration(min=5)},
    )
    assert r.status_code == 422
    message = r.json()["errors"]["configuration.min"][0]
    assert message.startswith("Attribute 'min' is not allowed for text-type fields")


def test_create_field_missing_label_locale(db_session):
    _, form = _setup(db_session)
    client = TestClient(app)

    configuration = field_configuration(["en"])
    r = client.post(
        f"/forms/{form.id}/fields",
        headers=auth("owner@test.com"),
        json={"type": "text", "configuration": configuration},
    )
    assert r.status_code == 422
    assert "configuration.label.de" in r.json()["errors"]


def test_create_field_unknown_type(db_session):
    _, form = _setup(db_session)
    client = TestClient(app)

    r = client.post(
        f"/forms/{form.id}/fields",
        headers=auth("owner@test.com"),
        json={"type": "signature", "configuration": field_configuration()},
    )
    assert r.status_code == 422
    assert r.json()["errors"]["type"][0].startswith("Invalid field type: signature")


def test_create_field_type_taken_from_configuration(db_session):
    _, form = _setup(db_session)
    client = TestClient(app)

    r = client.post(
        f"/forms/{form.id}/fields",
        headers=auth("owner@test.com"),
        json={"configuration": field_configuration(field_type="email", name="email")},
    )
    assert r.status_code == 201
    assert r.json()["data"]["type"] == "email"


def test_create_field_type_copied_into_configuration(db_session):
    _, form = _setup(db_session)
    client = TestClient(app)

    configuration = field_configuration(name="phone")
    del configuration["type"]
    r = client.post(
        f"/forms/{form.id}/fields",
        headers=auth("owner@test.com"),
        json={"type": "tel", "configuration": configuration},
    )
    assert r.status_code == 201
    assert r.json()["data"]["configuration"]["type"] == "tel"


def test_order_defaults_to_max_plus_one(db_session):
    user, form = _setup(db_session)
    create_field(db_session, user, form, name="first", order=5)

    client = TestClient(app)
    r = client.post(
        f"/forms/{form.id}/fields",
        headers=auth("owner@test.com"),
        json={"type": "text", "configuration": field_configuration(name="second")},
    )
    assert r.status_code == 201
    assert r.json()["data"]["order"] == 6


def test_negative_order_rejected(db_session):
    _, form = _setup(db_session)
    client = TestClient(app)

    r = client.post(
        f"/forms/{form.id}/fields",
        headers=auth("owner@test.com"),
        json={"type": "text", "order": -1, "configuration": field_configuration()},
    )
    assert r.status_code == 422
    assert "order" in r.json()["errors"]


def test_create_field_with_validation_rules(db_session):
    _, form = _setup(db_session)
    client = TestClient(app)

    rules = {"capital": {"rule": "regex:^[A-Z]", "error_messages": {"en": "Capital letter", "de": "Grossbuchstabe"}}}
    r = client.post(
        f"/forms/{form.id}/fields",
        headers=auth("owner@test.com"),
        json={"type": "text", "configuration": field_configuration(), "validation_rules": rules},
    )
    assert r.status_code == 201
    assert r.json()["data"]["validation_rules"] == rules


def test_create_field_with_incomplete_rule_messages(db_session):
    _, form = _setup(db_session)
    client = TestClient(app)

    rules = {"capital": {"rule": "regex:^[A-Z]", "error_messages": {"en": "Capital letter"}}}
    r = client.post(
        f"/forms/{form.id}/fields",
        headers=auth("owner@test.com"),
        json={"type": "text", "configuration": field_configuration(), "validation_rules": rules},
    )
    assert r.status_code == 422
    assert r.json()["errors"] == {
        "validation_rules.capital.error_messages.de": ["Rule 'capital' missing error message for locale: de"]
    }


def test_field_limit_per_form(db_session, monkeypatch):
    user, form = _setup(db_session)
    monkeypatch.setattr(settings, "MAX_FIELDS_PER_FORM", 2)
    create_field(db_session, user, form, name="a")
    create_field(db_session, user, form, name="b")

    client = TestClient(app)
    r = client.post(
        f"/forms/{form.id}/fields",
        headers=auth("owner@test.com"),
        json={"type": "text", "configuration": field_configuration(name="c")},
    )
    assert r.status_code == 422
    assert r.json()["errors"] == {"form_id": ["Form cannot have more than 2 fields"]}


def test_create_field_on_other_users_form(db_session):
    _, form = _setup(db_session)
    create_user(db_session, "intruder@test.com")
    client = TestClient(app)

    r = client.post(
        f"/forms/{form.id}/fields",
        headers=auth("intruder@test.com"),
        json={"type": "text", "configuration": field_configuration()},
    )
    assert r.status_code == 404


def test_list_fields_ordered(db_session):
    user, form = _setup(db_session)
    create_field(db_session, user, form, name="c", order=3)
    create_field(db_session, user, form, name="a", order=1)
    create_field(db_session, user, form, name="b", order=2)

    client = TestClient(app)
    r = client.get(f"/forms/{form.id}/fields", headers=auth("owner@test.com"))
    assert r.status_code == 200
    assert [f["configuration"]["name"] for f in r.json()["data"]] == ["a", "b", "c"]


def test_get_field_not_found(db_session):
    user, form = _setup(db_session)
    other = create_form(db_session, user, name="Other")
    field = create_field(db_session, user, other, name="elsewhere")

    client = TestClient(app)
    r = client.get(f"/forms/{form.id}/fields/{field.id}", headers=auth("owner@test.com"))
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Form or field not found"}

    r = client.get(f"/forms/{form.id}/fields/nope", headers=auth("owner@test.com"))
    assert r.status_code == 404


def test_update_field_partial_label(db_session):
    """Sending label.en alone keeps label.de and the rest of the configuration"""
    user, form = _setup(db_session)
    field = create_field(db_session, user, form, name="first_name", maxlength=40)

    client = TestClient(app)
    r = client.patch(
        f"/forms/{form.id}/fields/{field.id}",
        headers=auth("owner@test.com"),
        json={"configuration": {"label": {"en": "Given name"}}},
    )
    assert r.status_code == 200
    configuration = r.json()["data"]["configuration"]
    assert configuration["label"] == {"en": "Given name", "de": "First Name (de)"}
    assert configuration["maxlength"] == 40
    assert configuration["name"] == "first_name"


def test_update_field_remove_attribute_with_null(db_session):
    user, form = _setup(db_session)
    field = create_field(db_session, user, form, maxlength=40)

    client = TestClient(app)
    r = client.put(
        f"/forms/{form.id}/fields/{field.id}",
        headers=auth("owner@test.com"),
        json={"configuration": {"maxlength": None}},
    )
    assert r.status_code == 200
    assert "maxlength" not in r.json()["data"]["configuration"]


def test_update_field_type_change_revalidates(db_session):
    user, form = _setup(db_session)
    field = create_field(db_session, user, form, name="amount", maxlength=10)

    client = TestClient(app)
    r = client.patch(
        f"/forms/{form.id}/fields/{field.id}",
        headers=auth("owner@test.com"),
        json={"type": "number"},
    )
    assert r.status_code == 422
    assert "configuration.maxlength" in r.json()["errors"]

    r = client.patch(
        f"/forms/{form.id}/fields/{field.id}",
        headers=auth("owner@test.com"),
        json={"type": "number", "configuration": {"maxlength": None, "min": 0}},
    )
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["type"] == "number"
    assert data["configuration"]["type"] == "number"


def test_update_field_invalid_keeps_stored_state(db_session):
    user, form = _setup(db_session)
    field = create_field(db_session, user, form, field_type="number", name="age", min=0, max=10)

    client = TestClient(app)
    r = client.patch(
        f"/forms/{form.id}/fields/{field.id}",
        headers=auth("owner@test.com"),
        json={"configuration": {"min": 50}},
    )
    assert r.status_code == 422

    db_session.expire_all()
    assert db_session.get(Field, field.id).configuration["min"] == 0


def test_update_field_order(db_session):
    user, form = _setup(db_session)
    field = create_field(db_session, user, form, order=1)

    client = TestClient(app)
    r = client.patch(
        f"/forms/{form.id}/fields/{field.id}",
        headers=auth("owner@test.com"),
        json={"order": 9},
    )
    assert r.status_code == 200
    assert r.json()["data"]["order"] == 9


def test_update_field_unknown_form(db_session):
    user, form = _setup(db_session)
    field = create_field(db_session, user, form)

    client = TestClient(app)
    r = client.patch(
        f"/forms/00000000-0000-0000-0000-000000000000/fields/{field.id}",
        headers=auth("owner@test.com"),
        json={"order": 2},
    )
    assert r.status_code == 404
    assert r.json()["message"] == "Form or field not found"


def test_delete_field(db_session):
    user, form = _setup(db_session)
    field = create_field(db_session, user, form)
    keep = create_field(db_session, user, form, name="keep")

    client = TestClient(app)
    r = client.delete(f"/forms/{form.id}/fields/{field.id}", headers=auth("owner@test.com"))
    assert r.status_code == 200
    assert r.json()["message"] == "Field deleted successfully"

    r = client.get(f"/forms/{form.id}/fields", headers=auth("owner@test.com"))
    assert [f["id"] for f in r.json()["data"]] == [str(keep.id)]


def test_validate_preview_does_not_write(db_session):
    _, form = _setup(db_session)
    client = TestClient(app)

    r = client.post(
        f"/forms/{form.id}/fields/validate",
        headers=auth("owner@test.com"),
        json={"type": "number", "configuration": field_configuration(field_type="number", name="n", min=9, max=1)},
    )
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["valid"] is False
    assert data["errors"] == [{"field": "configuration.min", "message": "min must be less than max"}]

    r = client.post(
        f"/forms/{form.id}/fields/validate",
        headers=auth("owner@test.com"),
        json={"type": "text", "configuration": field_configuration()},
    )
    assert r.json()["data"] == {"valid": True, "errors": []}
    assert db_session.query(Field).count() == 0


def test_validate_preview_as_update(db_session):
    user, form = _setup(db_session)
    field = create_field(db_session, user, form, field_type="number", name="n", min=0, max=10)

    client = TestClient(app)
    r = client.post(
        f"/forms/{form.id}/fields/validate?field_id={field.id}",
        headers=auth("owner@test.com"),
        json={"configuration": {"max": -1}},
    )
    assert r.status_code == 200
    assert r.json()["data"]["valid"] is False

    db_session.expire_all()
    assert db_session.get(Field, field.id).configuration["max"] == 10


def test_time_bounds_with_offset_rejected_not_crashing(db_session):
    _, form = _setup(db_session)
    client = TestClient(app)

    configuration = field_configuration(field_type="time", name="opens_at", min="10:00+05:00", max="11:00")
    r = client.post(
        f"/forms/{form.id}/fields",
        headers=auth("owner@test.com"),
        json={"type": "time", "configuration": configuration},
    )
    assert r.status_code == 422
    assert r.json()["errors"] == {
        "configuration.min": ["Invalid date format for min value (expected HH:MM[:SS])"]
    }


def test_field_on_form_without_locales(db_session):
    user = create_user(db_session, "owner@test.com")
    form = Form(user_id=user.id, name={}, configuration={"locales": []})
    db_session.add(form)
    db_session.commit()

    client = TestClient(app)
    r = client.post(
        f"/forms/{form.id}/fields",
        headers=auth("owner@test.com"),
        json={"type": "text", "configuration": field_configuration()},
    )
    assert r.status_code == 422
    assert r.json()["errors"] == {"configuration.locales": ["Form must have locales defined"]}
