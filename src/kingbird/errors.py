"""Exception hierarchy for schema definition and remote operations."""


class KingbirdError(Exception):
    """Base class for all errors raised by kingbird."""


class SchemaDefinitionError(KingbirdError, TypeError):
    """A schema declaration is malformed (bad type, bad default, collision)."""


class FieldTypeError(SchemaDefinitionError):
    """A field type tag is not one of the supported primitive kinds."""


class FilterReferenceError(KingbirdError, LookupError):
    """A filter was registered on a field the schema does not declare."""


class ArgumentError(KingbirdError, ValueError):
    """An operation was called with invalid arguments; no request was sent."""


class StatusError(KingbirdError):
    """The backend answered with a status other than 200."""

    def __init__(self, status_code: int, message: str | None = None):
        self.status_code = status_code
        super().__init__(message or f"{status_code} error.")


class RemovalError(StatusError):
    """The backend refused to remove a record."""


class CardinalityError(KingbirdError):
    """A response carried an unexpected number of records."""

    def __init__(self, count: int, expected: int = 1):
        self.count = count
        self.expected = expected
        super().__init__(
            f"Expected {expected} record(s) in response, got {count}."
        )
