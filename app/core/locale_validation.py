from __future__ import annotations

from typing import Any, Iterable

from app.core.errors import ConfigurationError

UI_ELEMENTS = ("placeholder", "title", "aria-label", "help-text")

_UNREGISTERED_SUFFIX = "Only locales registered in form are allowed."


def _blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return not value


def _as_locale_map(values: Any, path: str, subject: str) -> dict:
    if not isinstance(values, dict):
        raise ConfigurationError(path, f"{subject} must be an object keyed by locale")
    return values


def require_locales(
    locales: Iterable[str],
    values: Any,
    *,
    path: str,
    subject: str,
) -> None:
    """
    Every registered locale must carry a non-blank value.
    Error path: <path>.<locale>
    """
    if values is None:
        values = {}
    values = _as_locale_map(values, path, subject)
    for locale in locales:
        if _blank(values.get(locale)):
            raise ConfigurationError(
                f"{path}.{locale}",
                f"Missing {subject.lower()} for locale: {locale}",
            )


def restrict_locales(
    locales: Iterable[str],
    values: Any,
    *,
    path: str,
    subject: str,
    suffix: str = _UNREGISTERED_SUFFIX,
) -> None:
    """
    No key outside the registered set; present values must be strings
    (or null, which counts as "not translated yet").
    """
    if values is None:
        return
    values = _as_locale_map(values, path, subject)
    registered = set(locales)
    for locale, value in values.items():
        if locale not in registered:
            raise ConfigurationError(
                f"{path}.{locale}",
                f"{subject} has unregistered locale: {locale}. {suffix}",
            )
        if value is not None and not isinstance(value, str):
            raise ConfigurationError(
                f"{path}.{locale}",
                f"{subject} for locale {locale} must be a string",
            )


def exact_locales(locales: Iterable[str], values: Any, *, path: str, subject: str, **kw) -> None:
    locales = list(locales)
    require_locales(locales, values, path=path, subject=subject)
    restrict_locales(locales, values, path=path, subject=subject, **kw)


def validate_form_i18n(locales: list[str], name: Any, description: Any) -> None:
    exact_locales(
        locales,
        name,
        path="name",
        subject="Name",
        suffix="Only registered locales are allowed.",
    )
    # description is optional, but may not introduce locales
    if description:
        restrict_locales(locales, description, path="description", subject="Description")


def validate_field_i18n(locales: list[str], configuration: dict) -> None:
    """
    Checks every i18n map a field configuration may carry:
      label                          exact locale set
      placeholder                    subset
      options[i].label               subset
      validation.messages.<rule>     subset
      ui.<element>                   subset
    """
    exact_locales(locales, configuration.get("label"), path="configuration.label", subject="Label")

    if "placeholder" in configuration:
        restrict_locales(
            locales,
            configuration["placeholder"],
            path="configuration.placeholder",
            subject="Placeholder",
        )

    options = configuration.get("options")
    if isinstance(options, list):
        for index, option in enumerate(options):
            if isinstance(option, dict) and isinstance(option.get("label"), dict):
                restrict_locales(
                    locales,
                    option["label"],
                    path=f"configuration.options.{index}.label",
                    subject=f"Option {index} label",
                )

    validation = configuration.get("validation")
    if isinstance(validation, dict) and isinstance(validation.get("messages"), dict):
        for rule_name, messages in validation["messages"].items():
            if isinstance(messages, dict):
                restrict_locales(
                    locales,
                    messages,
                    path=f"configuration.validation.messages.{rule_name}",
                    subject=f"Validation message for rule '{rule_name}'",
                )

    ui = configuration.get("ui")
    if isinstance(ui, dict):
        for element in UI_ELEMENTS:
            if isinstance(ui.get(element), dict):
                restrict_locales(
                    locales,
                    ui[element],
                    path=f"configuration.ui.{element}",
                    subject=f"UI element '{element}'",
                )
