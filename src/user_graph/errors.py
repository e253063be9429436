"""Domain exceptions."""

from graphql import GraphQLError


class SchemaError(Exception):
    """Type registry misconfiguration. Fatal at startup."""


class UnknownType(SchemaError, LookupError):
    """Type name was never registered."""

    def __init__(self, name: str):
        super().__init__(f"Unknown type: {name}")
        self.name = name


class DuplicateType(SchemaError):
    """Type name registered twice."""

    def __init__(self, name: str):
        super().__init__(f"Type already registered: {name}")
        self.name = name


class RegistryFrozen(SchemaError):
    """Registration attempted after the registry was frozen."""

    def __init__(self, name: str):
        super().__init__(f"Cannot register {name}: registry is frozen")
        self.name = name


class ArgumentCoercionFailure(ValueError):
    """Argument value does not fit its declared scalar kind."""

    def __init__(self, argument: str, value, kind: str):
        super().__init__(f"Argument '{argument}' has invalid {kind} value: {value!r}")
        self.argument = argument
        self.value = value
        self.kind = kind


class BackendError(Exception):
    """REST backend call failed."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class BackendNotFound(BackendError):
    """Backend has no record for the requested path."""


class BackendUnavailable(BackendError):
    """Backend unreachable, timed out or answered with an error."""


class MalformedQuery(Exception):
    """Query document rejected before execution."""

    def __init__(self, errors: list[GraphQLError] | str):
        if isinstance(errors, str):
            errors = [GraphQLError(errors)]
        self.errors = list(errors)
        super().__init__("; ".join(error.message for error in self.errors))

    @property
    def formatted(self) -> dict:
        """Response body for a rejected request."""
        return {"errors": [error.formatted for error in self.errors]}
