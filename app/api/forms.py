from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.audit import log_event
from app.core.security import get_current_user
from app.db.session import get_db
from app.models.form import Form
from app.models.user import User
from app.schemas.forms import FormCreate, FormOut, FormUpdate, FormWithFieldsOut
from app.schemas.responses import ApiResponse
from app.services import forms as form_service
from app.api.fields import field_out

router = APIRouter(prefix="/forms", tags=["forms"])


def form_out(form: Form) -> FormOut:
    return FormOut(
        id=str(form.id),
        user_id=str(form.user_id),
        name=form.name,
        description=form.description,
        is_active=form.is_active,
        configuration=form.configuration,
        created_at=form.created_at,
        updated_at=form.updated_at,
    )


def form_with_fields_out(form: Form) -> FormWithFieldsOut:
    return FormWithFieldsOut(
        **form_out(form).model_dump(),
        fields=[field_out(f) for f in sorted(form.fields, key=lambda f: f.order)],
    )


@router.get("", response_model=ApiResponse[list[FormOut]])
def list_forms(
    is_active: bool | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    rows = form_service.list_forms(db, current_user, is_active=is_active)
    return ApiResponse(message="Forms retrieved successfully", data=[form_out(r) for r in rows])


@router.post("", response_model=ApiResponse[FormOut], status_code=status.HTTP_201_CREATED)
def create_form(
    payload: FormCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    form = form_service.create_form(db, current_user, payload.model_dump())

    log_event(
        db=db,
        actor=current_user,
        action="FORM_CREATED",
        entity_type="form",
        entity_id=form.id,
        metadata={"locales": form.locales},
    )

    db.commit()
    db.refresh(form)
    return ApiResponse(message="Form created successfully", data=form_out(form))


@router.get("/{form_id}", response_model=ApiResponse[FormWithFieldsOut])
def get_form(
    form_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    form = form_service.load_form(db, current_user, form_id)
    return ApiResponse(message="Form retrieved successfully", data=form_with_fields_out(form))


@router.api_route("/{form_id}", methods=["PUT", "PATCH"], response_model=ApiResponse[FormOut])
def update_form(
    form_id: str,
    payload: FormUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    changes = payload.model_dump(exclude_unset=True)
    form = form_service.update_form(db, current_user, form_id, changes)

    log_event(
        db=db,
        actor=current_user,
        action="FORM_UPDATED",
        entity_type="form",
        entity_id=form.id,
        metadata={"keys": sorted(changes)},
    )

    db.commit()
    db.refresh(form)
    return ApiResponse(message="Form updated successfully", data=form_out(form))


@router.delete("/{form_id}", response_model=ApiResponse[None])
def delete_form(
    form_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    form = form_service.delete_form(db, current_user, form_id)

    log_event(
        db=db,
        actor=current_user,
        action="FORM_DELETED",
        entity_type="form",
        entity_id=form.id,
    )

    db.commit()
    return ApiResponse(message="Form deleted successfully")
