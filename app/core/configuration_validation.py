from __future__ import annotations

import re
from datetime import datetime
from typing import Any

from app.core.errors import ConfigurationError

# allowed on every field type
COMMON_ATTRIBUTES = (
    "type", "name", "label", "required", "class", "style",
    "placeholder", "default_value", "validation", "ui",
)

TEXT_TYPES = ("text", "email", "password", "tel", "search", "url")
NUMBER_TYPES = ("number", "range")
CHOICE_TYPES = ("select", "radio")
DATE_TYPES = ("date", "time", "datetime-local")

TYPE_GROUPS: dict[str, tuple[str, tuple[str, ...]]] = {}


def _group(name: str, types: tuple[str, ...], attributes: tuple[str, ...]) -> None:
    for t in types:
        TYPE_GROUPS[t] = (name, attributes)


_group(
    "text-type",
    TEXT_TYPES,
    ("maxlength", "minlength", "pattern", "autocomplete", "size",
     "readonly", "disabled", "autofocus", "spellcheck"),
)
_group(
    "textarea-type",
    ("textarea",),
    ("rows", "cols", "maxlength", "minlength", "readonly",
     "disabled", "autofocus", "spellcheck", "wrap"),
)
_group("number-type", NUMBER_TYPES, ("min", "max", "step", "readonly", "disabled", "autofocus"))
_group("select-type", CHOICE_TYPES, ("multiple", "size", "disabled", "autofocus", "options", "inline"))
_group("checkbox-type", ("checkbox",), ("checked", "value", "disabled", "autofocus", "options"))
_group("file-type", ("file",), ("accept", "multiple", "capture", "maxFileSize", "disabled", "autofocus"))
_group("datetime-type", DATE_TYPES, ("min", "max", "step", "readonly", "disabled", "autofocus"))
_group("color-type", ("color",), ("disabled", "autofocus"))
_group("hidden-type", ("hidden",), ("value", "disabled"))

# mime/subtype, type/*, */* or .ext
ACCEPT_RE = re.compile(r"^(\*/\*|[a-z]+/(\*|[a-z0-9][a-z0-9.+-]*)|\.[a-z0-9][a-z0-9.-]*)$", re.IGNORECASE)

_STRING_LIMITS = {"class": 500, "style": 1000, "default_value": 1000}


def allowed_attributes(field_type: str) -> tuple[str, ...]:
    return TYPE_GROUPS.get(field_type, ("", ()))[1]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_whitelist(field_type: str, config: dict) -> None:
    group, allowed = TYPE_GROUPS.get(field_type, (f"{field_type}-type", ()))
    for key in config:
        if key not in allowed and key not in COMMON_ATTRIBUTES:
            raise ConfigurationError(
                f"configuration.{key}",
                f"Attribute '{key}' is not allowed for {group} fields. Allowed: {', '.join(allowed)}",
            )


def _check_name(config: dict) -> None:
    name = config.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ConfigurationError("configuration.name", "Field 'name' is required for all field types")
    if len(name) > 255:
        raise ConfigurationError("configuration.name", "Field 'name' may not be longer than 255 characters")


def _check_common(config: dict) -> None:
    if "required" in config and not isinstance(config["required"], bool):
        raise ConfigurationError("configuration.required", "The required attribute must be true or false")

    for key, limit in _STRING_LIMITS.items():
        value = config.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ConfigurationError(f"configuration.{key}", f"The {key} attribute must be a string")
        if len(value) > limit:
            raise ConfigurationError(
                f"configuration.{key}", f"The {key} attribute may not be longer than {limit} characters"
            )


def _non_negative_int(config: dict, key: str) -> None:
    if key in config and (not _is_int(config[key]) or config[key] < 0):
        raise ConfigurationError(f"configuration.{key}", f"{key} must be a non-negative integer")


def _positive_int(config: dict, key: str, message: str | None = None) -> None:
    if key in config and (not _is_int(config[key]) or config[key] < 1):
        raise ConfigurationError(f"configuration.{key}", message or f"{key} must be a positive integer")


def _check_lengths(config: dict) -> None:
    _non_negative_int(config, "minlength")
    _non_negative_int(config, "maxlength")
    if "minlength" in config and "maxlength" in config:
        if config["minlength"] > config["maxlength"]:
            raise ConfigurationError("configuration.minlength", "Minlength cannot be greater than maxlength")


def _check_text(config: dict) -> None:
    _check_lengths(config)
    _positive_int(config, "size")
    pattern = config.get("pattern")
    if pattern is not None:
        if not isinstance(pattern, str):
            raise ConfigurationError("configuration.pattern", "Pattern must be a string")
        try:
            re.compile(pattern)
        except re.error:
            raise ConfigurationError("configuration.pattern", f"Invalid pattern: {pattern}")


def _check_textarea(config: dict) -> None:
    _check_lengths(config)
    _positive_int(config, "rows")
    _positive_int(config, "cols")


def _check_number(config: dict) -> None:
    for key in ("min", "max", "step"):
        if key in config and not _is_number(config[key]):
            raise ConfigurationError(f"configuration.{key}", f"{key} must be a number")

    mn = config.get("min")
    mx = config.get("max")
    if mn is not None and mx is not None and mn > mx:
        raise ConfigurationError("configuration.min", "min must be less than max")

    step = config.get("step")
    if step is not None:
        if step <= 0:
            raise ConfigurationError("configuration.step", "Step must be greater than zero")
        if mn is not None and mx is not None and mx > mn and step > mx - mn:
            raise ConfigurationError(
                "configuration.step", "Step cannot be greater than the range between min and max"
            )


def _check_options(config: dict) -> None:
    options = config.get("options")
    if not isinstance(options, list) or not options:
        raise ConfigurationError("configuration.options", "Options array is required for select/radio fields")

    for index, option in enumerate(options):
        if not isinstance(option, dict):
            raise ConfigurationError(
                f"configuration.options.{index}", f"Option {index} must have both 'value' and 'label'"
            )
        value = option.get("value")
        label = option.get("label")
        if value is None or label is None:
            raise ConfigurationError(
                f"configuration.options.{index}", f"Option {index} must have both 'value' and 'label'"
            )
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError(
                f"configuration.options.{index}.value", f"Option {index} value must be a non-empty string"
            )
        if not isinstance(label, dict) or not label:
            raise ConfigurationError(
                f"configuration.options.{index}.label", f"Option {index} label must be an object keyed by locale"
            )


def _check_select(config: dict) -> None:
    _check_options(config)
    if "multiple" in config and not isinstance(config["multiple"], bool):
        raise ConfigurationError("configuration.multiple", "multiple must be true or false")
    _positive_int(config, "size")
    if config.get("multiple") and "size" in config and config["size"] < 2:
        raise ConfigurationError("configuration.size", "Size must be at least 2 for multiple select fields")


def _check_file(config: dict) -> None:
    accept = config.get("accept")
    if accept is not None:
        if not isinstance(accept, str):
            raise ConfigurationError("configuration.accept", "Accept must be a comma-separated string")
        for item in accept.split(","):
            item = item.strip()
            if not ACCEPT_RE.match(item):
                raise ConfigurationError("configuration.accept", f"Invalid accept type format: {item}")
    _positive_int(config, "maxFileSize")


_BOUND_FORMATS = {
    "date": (re.compile(r"^\d{4}-\d{2}-\d{2}$"), ("%Y-%m-%d",)),
    "time": (re.compile(r"^\d{2}:\d{2}(:\d{2})?$"), ("%H:%M", "%H:%M:%S")),
    "datetime-local": (
        re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2})?$"),
        ("%Y-%m-%dT%H:%M", "%Y-%m-%dT%H:%M:%S"),
    ),
}


def _parse_bound(field_type: str, value: Any) -> datetime:
    # naive datetimes only, so min/max always compare
    shape, formats = _BOUND_FORMATS[field_type]
    if not isinstance(value, str) or not shape.fullmatch(value):
        raise ValueError(value)
    for fmt in formats:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    raise ValueError(value)


_DATE_FORMATS = {"date": "YYYY-MM-DD", "time": "HH:MM[:SS]", "datetime-local": "YYYY-MM-DDTHH:MM[:SS]"}


def _check_datetime(field_type: str, config: dict) -> None:
    bounds = {}
    for key in ("min", "max"):
        if key in config:
            try:
                bounds[key] = _parse_bound(field_type, config[key])
            except ValueError:
                raise ConfigurationError(
                    f"configuration.{key}",
                    f"Invalid date format for {key} value (expected {_DATE_FORMATS[field_type]})",
                )

    if "min" in bounds and "max" in bounds and bounds["min"] >= bounds["max"]:
        raise ConfigurationError("configuration.min", "Min date must be before max date")

    _positive_int(config, "step", "Step must be a positive integer for date and time fields")


def validate_configuration(field_type: str, configuration: Any) -> None:
    """
    Validate a field configuration against its type.

    Order: attribute whitelist, then `name`, then common attribute shapes,
    then type-specific consistency. The first failure is raised as a
    ConfigurationError; nothing is collected.
    """
    if not isinstance(configuration, dict):
        raise ConfigurationError("configuration", "Configuration must be an object")

    _check_whitelist(field_type, configuration)
    _check_name(configuration)
    _check_common(configuration)

    if field_type in TEXT_TYPES:
        _check_text(configuration)
    elif field_type == "textarea":
        _check_textarea(configuration)
    elif field_type in NUMBER_TYPES:
        _check_number(configuration)
    elif field_type in CHOICE_TYPES:
        _check_select(configuration)
    elif field_type == "file":
        _check_file(configuration)
    elif field_type in DATE_TYPES:
        _check_datetime(field_type, configuration)
