"""
Write-time validation for forms and fields.

The service layer builds a candidate (stored state overlaid with the incoming
changes), runs validate_form / validate_field on it, and only persists when
no exception was raised. Nothing in this module touches the database.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Iterable

from app.core.configuration_validation import validate_configuration
from app.core.errors import ConfigurationError, ReferentialError
from app.core.locale_validation import validate_field_i18n, validate_form_i18n
from app.core.merge import merge_patch
from app.core.validation_rules import validate_validation_rules

# top-level keys merged as JSON objects on update; the rest are replaced
FORM_OBJECT_KEYS = ("name", "description", "configuration")
FIELD_OBJECT_KEYS = ("configuration", "validation_rules")


@dataclass(frozen=True)
class FormContext:
    """What a field needs to know about its parent form."""
    locales: list[str] = field(default_factory=list)


def _overlay(existing: dict, changes: dict, object_keys: Iterable[str]) -> dict:
    candidate = copy.deepcopy(existing)
    for key, value in changes.items():
        if key in object_keys and value is not None and isinstance(candidate.get(key), dict):
            candidate[key] = merge_patch(candidate[key], value)
        else:
            candidate[key] = copy.deepcopy(value)
    return candidate


def build_form_candidate(existing: dict | None, changes: dict) -> dict:
    """Unsupplied keys keep their stored value; nested maps merge."""
    return _overlay(existing or {}, changes, FORM_OBJECT_KEYS)


def build_field_candidate(existing: dict | None, changes: dict) -> dict:
    """
    Same overlay as forms, plus type sync:
      - a `type` sent with the write wins and is copied into configuration.type
      - otherwise a configuration.type sent with the write replaces the stored type
    """
    candidate = _overlay(existing or {}, changes, FIELD_OBJECT_KEYS)

    configuration = candidate.get("configuration")
    if not isinstance(configuration, dict):
        return candidate

    sent_configuration = changes.get("configuration")
    if changes.get("type") is not None:
        field_type = changes["type"]
    elif isinstance(sent_configuration, dict) and sent_configuration.get("type") is not None:
        field_type = sent_configuration["type"]
    else:
        field_type = candidate.get("type") or configuration.get("type")

    candidate["type"] = field_type
    if field_type is not None:
        configuration["type"] = field_type
    return candidate


def normalize_locales(configuration: Any, allowed_locales: Iterable[str], max_locales: int | None = None) -> list[str]:
    if not isinstance(configuration, dict):
        raise ConfigurationError("configuration", "Configuration must be an object")

    locales = configuration.get("locales")
    if not isinstance(locales, list) or not locales:
        raise ConfigurationError("configuration.locales", "At least one locale must be specified.")

    allowed = list(allowed_locales)
    seen: set[str] = set()
    for locale in locales:
        if locale not in allowed:
            raise ConfigurationError(
                f"configuration.locales.{locale}",
                f"Invalid locale: {locale}. Allowed: {', '.join(allowed)}",
            )
        if locale in seen:
            raise ConfigurationError("configuration.locales", f"Duplicate locale: {locale}")
        seen.add(locale)

    if max_locales is not None and len(locales) > max_locales:
        raise ConfigurationError("configuration.locales", f"A form may register at most {max_locales} locales")
    return list(locales)


def validate_form(
    candidate: dict,
    *,
    allowed_locales: Iterable[str],
    max_locales: int | None = None,
) -> dict:
    """
    candidate: {"name": {...}, "description": {...}|None, "is_active": bool, "configuration": {"locales": [...]}}
    Returns the candidate unchanged when valid.
    """
    locales = normalize_locales(candidate.get("configuration"), allowed_locales, max_locales)

    if "is_active" in candidate and not isinstance(candidate["is_active"], bool):
        raise ConfigurationError("is_active", "The is_active field must be true or false")

    validate_form_i18n(locales, candidate.get("name"), candidate.get("description"))
    return candidate


def validate_field(
    candidate: dict,
    form: FormContext | None,
    *,
    allowed_types: Iterable[str],
) -> dict:
    """
    candidate: {"type": str, "order": int, "configuration": {...}, "validation_rules": {...}|None}

    Raises ReferentialError when the parent form is missing or has no
    locales, ConfigurationError for everything else.
    """
    if form is None:
        raise ReferentialError("form_id", "Field must belong to a form")
    if not form.locales:
        raise ReferentialError("configuration.locales", "Form must have locales defined")

    allowed = list(allowed_types)
    field_type = candidate.get("type")
    if field_type is None:
        raise ConfigurationError("type", "The type field is required.")
    if field_type not in allowed:
        raise ConfigurationError("type", f"Invalid field type: {field_type}. Valid types are: {', '.join(allowed)}")

    order = candidate.get("order")
    if order is not None and (isinstance(order, bool) or not isinstance(order, int) or order < 0):
        raise ConfigurationError("order", "The order must be a non-negative integer")

    configuration = candidate.get("configuration")
    if not isinstance(configuration, dict):
        raise ConfigurationError("configuration", "Configuration must be an object")

    validate_field_i18n(form.locales, configuration)
    validate_configuration(field_type, configuration)
    validate_validation_rules(candidate.get("validation_rules"), form.locales)
    return candidate
