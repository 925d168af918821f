from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import ConfigurationError, NotFoundError, ReferentialError
from app.core.form_validation import FormContext, build_field_candidate, validate_field
from app.models.field import Field
from app.models.form import Form
from app.models.user import User
from app.services.forms import apply_field, field_state, get_locales, load_form, parse_id

logger = logging.getLogger(__name__)


def form_context(db: Session, form: Form | None) -> FormContext | None:
    if form is None:
        return None
    return FormContext(locales=get_locales(db, form.id))


def load_field(db: Session, user: User, form_id, field_id) -> Field:
    try:
        form = load_form(db, user, form_id)
    except NotFoundError:
        raise NotFoundError("Form or field not found")

    fid = parse_id(field_id)
    field = None
    if fid is not None:
        field = (
            db.query(Field)
            .filter(Field.id == fid, Field.form_id == form.id)
            .one_or_none()
        )
    if not field:
        raise NotFoundError("Form or field not found")
    return field


def list_fields(db: Session, user: User, form_id) -> list[Field]:
    form = load_form(db, user, form_id)
    return (
        db.query(Field)
        .filter(Field.form_id == form.id)
        .order_by(Field.order.asc(), Field.created_at.asc())
        .all()
    )


def next_order(db: Session, form_id) -> int:
    max_order = db.query(func.max(Field.order)).filter(Field.form_id == form_id).scalar()
    return (max_order or 0) + 1


def _validate(db: Session, candidate: dict, form: Form | None, *, user: User, action: str) -> dict:
    try:
        return validate_field(candidate, form_context(db, form), allowed_types=settings.VALID_FIELD_TYPES)
    except (ConfigurationError, ReferentialError) as e:
        logger.warning("field %s rejected user=%s path=%s: %s", action, user.id, e.path, e.message)
        raise


def preview_field(db: Session, user: User, form_id, payload: dict, field_id=None) -> list[dict]:
    """
    Dry run of a create (or, with field_id, an update). Returns
    [{"field": path, "message": ...}], empty when the write would succeed.
    """
    if field_id is not None:
        field = load_field(db, user, form_id, field_id)
        form = field.form
        existing = field_state(field)
    else:
        form = load_form(db, user, form_id)
        existing = None

    candidate = build_field_candidate(existing, payload)
    try:
        validate_field(candidate, form_context(db, form), allowed_types=settings.VALID_FIELD_TYPES)
    except (ConfigurationError, ReferentialError) as e:
        return [{"field": e.path, "message": e.message}]
    return []


def create_field(db: Session, user: User, form_id, payload: dict) -> Field:
    form = load_form(db, user, form_id, for_update=True)

    if len(form.fields) >= settings.MAX_FIELDS_PER_FORM:
        raise ConfigurationError(
            "form_id", f"Form cannot have more than {settings.MAX_FIELDS_PER_FORM} fields"
        )

    candidate = build_field_candidate(None, payload)
    if candidate.get("order") is None:
        candidate["order"] = next_order(db, form.id)
    _validate(db, candidate, form, user=user, action="create")

    now = datetime.utcnow()
    field = Field(
        form_id=form.id,
        type=candidate["type"],
        order=candidate["order"],
        configuration=candidate["configuration"],
        validation_rules=candidate.get("validation_rules"),
        created_at=now,
        updated_at=now,
    )
    form.fields.append(field)
    db.flush()

    logger.info("field created id=%s form=%s type=%s order=%s", field.id, form.id, field.type, field.order)
    return field


def update_field(db: Session, user: User, form_id, field_id, changes: dict) -> Field:
    # lock the parent so its locale set cannot change under us
    try:
        form = load_form(db, user, form_id, for_update=True)
    except NotFoundError:
        raise NotFoundError("Form or field not found")
    field = load_field(db, user, form.id, field_id)

    candidate = build_field_candidate(field_state(field), changes)
    if candidate.get("order") is None:
        candidate["order"] = field.order
    _validate(db, candidate, form, user=user, action="update")

    apply_field(field, candidate, datetime.utcnow())
    db.flush()

    logger.info("field updated id=%s form=%s keys=%s", field.id, form.id, sorted(changes))
    return field


def delete_field(db: Session, user: User, form_id, field_id) -> Field:
    field = load_field(db, user, form_id, field_id)
    db.delete(field)
    db.flush()

    logger.info("field deleted id=%s form=%s", field.id, field.form_id)
    return field
