from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FormConfiguration(BaseModel):
    model_config = ConfigDict(extra="allow")

    locales: list[str] = Field(min_length=1)


class FormCreate(BaseModel):
    name: dict[str, str]
    description: dict[str, str | None] | None = None
    is_active: bool = True
    configuration: FormConfiguration


class FieldCreate(BaseModel):
    type: str | None = None
    order: int | None = Field(default=None, ge=0)
    configuration: dict[str, Any]
    validation_rules: dict[str, Any] | None = None


class FieldUpdate(BaseModel):
    type: str | None = None
    order: int | None = Field(default=None, ge=0)
    configuration: dict[str, Any] | None = None
    validation_rules: dict[str, Any] | None = None


class FormUpdate(BaseModel):
    """
    Partial update: only the keys sent are applied; nested maps merge.

    `fields` maps field ids to field partial updates saved together with
    the form, so labels can follow a locale change in one request.
    """
    name: dict[str, str | None] | None = None
    description: dict[str, str | None] | None = None
    is_active: bool | None = None
    configuration: dict[str, Any] | None = None
    fields: dict[str, FieldUpdate] | None = None


class FieldOut(BaseModel):
    id: str
    form_id: str
    type: str
    order: int
    configuration: dict[str, Any]
    validation_rules: dict[str, Any] | None
    created_at: datetime
    updated_at: datetime


class FormOut(BaseModel):
    id: str
    user_id: str
    name: dict[str, Any]
    description: dict[str, Any] | None
    is_active: bool
    configuration: dict[str, Any]
    created_at: datetime
    updated_at: datetime


class FormWithFieldsOut(FormOut):
    fields: list[FieldOut]
