from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.audit import log_event
from app.core.security import get_current_user
from app.db.session import get_db
from app.models.field import Field
from app.models.user import User
from app.schemas.forms import FieldCreate, FieldOut, FieldUpdate
from app.schemas.responses import ApiResponse
from app.schemas.validation import ValidationPreviewResponse
from app.services import fields as field_service

router = APIRouter(prefix="/forms/{form_id}/fields", tags=["fields"])


def field_out(f: Field) -> FieldOut:
    return FieldOut(
        id=str(f.id),
        form_id=str(f.form_id),
        type=f.type,
        order=f.order,
        configuration=f.configuration,
        validation_rules=f.validation_rules,
        created_at=f.created_at,
        updated_at=f.updated_at,
    )


@router.get("", response_model=ApiResponse[list[FieldOut]])
def list_fields(
    form_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    rows = field_service.list_fields(db, current_user, form_id)
    return ApiResponse(message="Fields retrieved successfully", data=[field_out(r) for r in rows])


@router.post("", response_model=ApiResponse[FieldOut], status_code=status.HTTP_201_CREATED)
def create_field(
    form_id: str,
    payload: FieldCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    field = field_service.create_field(db, current_user, form_id, payload.model_dump(exclude_unset=True))

    log_event(
        db=db,
        actor=current_user,
        action="FIELD_CREATED",
        entity_type="field",
        entity_id=field.id,
        metadata={"form_id": str(field.form_id), "type": field.type, "order": field.order},
    )

    db.commit()
    db.refresh(field)
    return ApiResponse(message="Field created successfully", data=field_out(field))


@router.post("/validate", response_model=ApiResponse[ValidationPreviewResponse])
def validate_field(
    form_id: str,
    payload: FieldUpdate,
    field_id: str | None = Query(default=None, description="Validate as an update of this field"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Run the same checks as create/update without writing anything.
    """
    errors = field_service.preview_field(
        db, current_user, form_id, payload.model_dump(exclude_unset=True), field_id=field_id
    )
    return ApiResponse(
        message="Field is valid" if not errors else "Validation failed",
        data=ValidationPreviewResponse(valid=not errors, errors=errors),
    )


@router.get("/{field_id}", response_model=ApiResponse[FieldOut])
def get_field(
    form_id: str,
    field_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    field = field_service.load_field(db, current_user, form_id, field_id)
    return ApiResponse(message="Field retrieved successfully", data=field_out(field))


@router.api_route("/{field_id}", methods=["PUT", "PATCH"], response_model=ApiResponse[FieldOut])
def update_field(
    form_id: str,
    field_id: str,
    payload: FieldUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    changes = payload.model_dump(exclude_unset=True)
    field = field_service.update_field(db, current_user, form_id, field_id, changes)

    log_event(
        db=db,
        actor=current_user,
        action="FIELD_UPDATED",
        entity_type="field",
        entity_id=field.id,
        metadata={"form_id": str(field.form_id), "keys": sorted(changes)},
    )

    db.commit()
    db.refresh(field)
    return ApiResponse(message="Field updated successfully", data=field_out(field))


@router.delete("/{field_id}", response_model=ApiResponse[None])
def delete_field(
    form_id: str,
    field_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    field = field_service.delete_field(db, current_user, form_id, field_id)

    log_event(
        db=db,
        actor=current_user,
        action="FIELD_DELETED",
        entity_type="field",
        entity_id=field.id,
        metadata={"form_id": str(field.form_id)},
    )

    db.commit()
    return ApiResponse(message="Field deleted successfully")
