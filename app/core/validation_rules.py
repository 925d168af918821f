from __future__ import annotations

from typing import Any

from app.core.errors import ConfigurationError
from app.core.locale_validation import restrict_locales


def validate_validation_rules(rules: Any, locales: list[str]) -> None:
    """
    rules example:
      {"company_email": {"rule": "email_domain:acme.test",
                         "error_messages": {"en": "Use your work email", "de": "..."}}}

    None or {} means no custom rules.
    """
    if not rules:
        return

    if not isinstance(rules, dict):
        raise ConfigurationError("validation_rules", "Validation rules must be an object keyed by rule name")

    for rule_name, rule in rules.items():
        path = f"validation_rules.{rule_name}"
        if not isinstance(rule, dict):
            raise ConfigurationError(path, f"Rule '{rule_name}' must be an object")

        implementation = rule.get("rule")
        if not isinstance(implementation, str) or not implementation.strip():
            raise ConfigurationError(f"{path}.rule", f"Rule '{rule_name}' must have a rule implementation")

        messages = rule.get("error_messages")
        if not isinstance(messages, dict):
            raise ConfigurationError(f"{path}.error_messages", f"Rule '{rule_name}' must have error_messages")

        for locale in locales:
            value = messages.get(locale)
            if not isinstance(value, str) or not value.strip():
                raise ConfigurationError(
                    f"{path}.error_messages.{locale}",
                    f"Rule '{rule_name}' missing error message for locale: {locale}",
                )

        restrict_locales(
            locales,
            messages,
            path=f"{path}.error_messages",
            subject=f"Error message for rule '{rule_name}'",
        )
