"""
Domain errors raised by the validators and the service layer.

HTTP translation lives in app.main; nothing here knows about status codes.
"""


class FormBuilderError(Exception):
    pass


class ConfigurationError(FormBuilderError):
    """A structural or consistency problem at a single field path."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message

    @property
    def errors(self) -> dict[str, list[str]]:
        return {self.path: [self.message]}

    def prefixed(self, prefix: str) -> "ConfigurationError":
        return type(self)(f"{prefix}.{self.path}", self.message)


class ReferentialError(FormBuilderError):
    """The parent form is missing or has no locales; aborts the whole write."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message

    @property
    def errors(self) -> dict[str, list[str]]:
        return {self.path: [self.message]}


class NotFoundError(FormBuilderError):
    # Same message whether the row is missing or owned by someone else.
    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)
        self.message = message
