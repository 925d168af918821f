from sqlalchemy.orm import Session

from app.models.field import Field
from app.models.form import Form
from app.models.user import User
from app.services import fields as field_service
from app.services import forms as form_service


def auth(email: str) -> dict:
    return {"X-User-Email": email}


def create_user(db: Session, email: str, full_name="User", is_active=True) -> User:
    u = User(email=email, full_name=full_name, is_active=is_active)
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def labels(locales, text: str) -> dict:
    return {locale: f"{text} ({locale})" for locale in locales}


def form_payload(locales=("en", "de"), name: str = "Contact", **extra) -> dict:
    payload = {
        "name": labels(locales, name),
        "configuration": {"locales": list(locales)},
    }
    payload.update(extra)
    return payload


def create_form(
    db: Session,
    user: User,
    *,
    locales=("en", "de"),
    name: str = "Contact",
    description: dict | None = None,
    is_active: bool = True,
) -> Form:
    form = form_service.create_form(
        db,
        user,
        form_payload(locales, name, description=description, is_active=is_active),
    )
    db.commit()
    db.refresh(form)
    return form


def field_configuration(
    locales=("en", "de"),
    *,
    field_type: str = "text",
    name: str = "first_name",
    **attrs,
) -> dict:
    """
    fields example:
      field_configuration(["en"], field_type="number", name="age", min=0, max=120)
    """
    configuration = {
        "type": field_type,
        "name": name,
        "label": labels(locales, name.replace("_", " ").title()),
    }
    configuration.update(attrs)
    return configuration


def create_field(
    db: Session,
    user: User,
    form: Form,
    *,
    field_type: str = "text",
    name: str = "first_name",
    order: int | None = None,
    validation_rules: dict | None = None,
    **attrs,
) -> Field:
    payload = {
        "type": field_type,
        "configuration": field_configuration(form.locales, field_type=field_type, name=name, **attrs),
    }
    if order is not None:
        payload["order"] = order
    if validation_rules is not None:
        payload["validation_rules"] = validation_rules

    field = field_service.create_field(db, user, form.id, payload)
    db.commit()
    db.refresh(field)
    return field


def select_options(locales=("en", "de"), values=("a", "b")) -> list[dict]:
    return [{"value": v, "label": labels(locales, v.upper())} for v in values]
