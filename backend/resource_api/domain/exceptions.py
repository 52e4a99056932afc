"""Domain-specific exceptions: framework-independent."""


class InvalidInputError(Exception):
    """Raised when caller-supplied data fails validation.

    ``fields`` lists every invalid field name (``["root"]`` when the input
    is not a JSON object at all).
    """

    def __init__(self, message: str, fields: list[str] | None = None):
        self.message = message
        self.fields = list(fields or [])
        super().__init__(message)


class NotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, key: str):
        self.entity_type = entity_type
        self.key = key
        super().__init__(f"{entity_type} '{key}' does not exist")
