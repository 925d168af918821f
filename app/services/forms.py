from __future__ import annotations

import logging
import uuid
from datetime import datetime

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import ConfigurationError, NotFoundError
from app.core.form_validation import (
    FormContext,
    build_field_candidate,
    build_form_candidate,
    validate_field,
    validate_form,
)
from app.models.field import Field
from app.models.form import Form
from app.models.user import User

logger = logging.getLogger(__name__)


def parse_id(value) -> uuid.UUID | None:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def form_state(form: Form) -> dict:
    return {
        "name": form.name,
        "description": form.description,
        "is_active": form.is_active,
        "configuration": form.configuration,
    }


def field_state(field: Field) -> dict:
    return {
        "type": field.type,
        "order": field.order,
        "configuration": field.configuration,
        "validation_rules": field.validation_rules,
    }


def apply_field(field: Field, candidate: dict, now: datetime) -> None:
    field.type = candidate["type"]
    field.order = candidate["order"]
    field.configuration = candidate["configuration"]
    field.validation_rules = candidate.get("validation_rules")
    field.updated_at = now


def get_locales(db: Session, form_id) -> list[str]:
    """
    Registered locales of a form, [] when the form does not exist.

    Field validation reads the parent locale set through here; inside a
    write the form is already in the session (and locked), so this is an
    identity-map hit rather than a second query.
    """
    fid = parse_id(form_id)
    if fid is None:
        return []
    form = db.get(Form, fid)
    return form.locales if form else []


def load_form(db: Session, user: User, form_id, *, for_update: bool = False) -> Form:
    fid = parse_id(form_id)
    if fid is None:
        raise NotFoundError("Form not found")

    q = db.query(Form).filter(Form.id == fid, Form.user_id == user.id)
    if for_update:
        q = q.with_for_update()
    form = q.one_or_none()
    if not form:
        raise NotFoundError("Form not found")
    return form


def list_forms(db: Session, user: User, *, is_active: bool | None = None) -> list[Form]:
    q = db.query(Form).filter(Form.user_id == user.id)
    if is_active is not None:
        q = q.filter(Form.is_active == is_active)
    return q.order_by(Form.created_at.desc()).all()


def _validate(candidate: dict, *, user: User, action: str) -> None:
    try:
        validate_form(
            candidate,
            allowed_locales=settings.VALID_LOCALES,
            max_locales=settings.MAX_LOCALES,
        )
    except ConfigurationError as e:
        logger.warning("form %s rejected user=%s path=%s: %s", action, user.id, e.path, e.message)
        raise


def create_form(db: Session, user: User, payload: dict) -> Form:
    candidate = build_form_candidate(None, payload)
    candidate.setdefault("is_active", True)
    candidate.setdefault("description", None)
    _validate(candidate, user=user, action="create")

    now = datetime.utcnow()
    form = Form(
        user_id=user.id,
        name=candidate["name"],
        description=candidate["description"],
        is_active=candidate["is_active"],
        configuration=candidate["configuration"],
        created_at=now,
        updated_at=now,
    )
    db.add(form)
    db.flush()

    logger.info("form created id=%s user=%s locales=%s", form.id, user.id, form.locales)
    return form


def _field_candidates(form: Form, field_changes: dict) -> dict:
    by_id = {str(f.id): f for f in form.fields}
    for fid in field_changes:
        if str(parse_id(fid)) not in by_id:
            raise ConfigurationError(f"fields.{fid}", "Field does not belong to this form")

    candidates = {}
    for fid, changes in field_changes.items():
        f = by_id[str(parse_id(fid))]
        candidate = build_field_candidate(field_state(f), changes or {})
        if candidate.get("order") is None:
            candidate["order"] = f.order
        candidates[f.id] = candidate
    return candidates


def _revalidate_fields(form: Form, locales: list[str], candidates: dict) -> None:
    # Every field, patched or stored, must hold under the form's locale set.
    context = FormContext(locales=locales)
    for f in form.fields:
        candidate = candidates.get(f.id) or build_field_candidate(None, field_state(f))
        try:
            validate_field(candidate, context, allowed_types=settings.VALID_FIELD_TYPES)
        except ConfigurationError as e:
            raise e.prefixed(f"fields.{f.id}")


def update_form(db: Session, user: User, form_id, changes: dict) -> Form:
    form = load_form(db, user, form_id, for_update=True)
    changes = dict(changes)
    field_changes = changes.pop("fields", None) or {}

    candidate = build_form_candidate(form_state(form), changes)
    _validate(candidate, user=user, action="update")

    new_locales = list(candidate["configuration"]["locales"])
    try:
        candidates = _field_candidates(form, field_changes)
        if candidates or set(new_locales) != set(form.locales):
            _revalidate_fields(form, new_locales, candidates)
    except ConfigurationError as e:
        logger.warning("form update rejected user=%s path=%s: %s", user.id, e.path, e.message)
        raise

    now = datetime.utcnow()
    form.name = candidate["name"]
    form.description = candidate.get("description")
    form.is_active = candidate["is_active"]
    form.configuration = candidate["configuration"]
    form.updated_at = now
    for f in form.fields:
        if f.id in candidates:
            apply_field(f, candidates[f.id], now)
    db.flush()

    logger.info(
        "form updated id=%s user=%s keys=%s fields=%s",
        form.id, user.id, sorted(changes), len(candidates),
    )
    return form


def delete_form(db: Session, user: User, form_id) -> Form:
    form = load_form(db, user, form_id)
    field_count = len(form.fields)
    db.delete(form)
    db.flush()

    logger.info("form deleted id=%s user=%s fields=%s", form.id, user.id, field_count)
    return form
