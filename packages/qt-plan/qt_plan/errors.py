"""Import errors raised by the plan parsers.

Messages are user-facing and surfaced verbatim as import errors.
"""


class PlanParseError(Exception):
    """Raised when raw plan text cannot be turned into an execution record."""


class EmptyInputError(PlanParseError):
    """Raised when the plan text is blank or whitespace only."""

    def __init__(self, message: str = "Execution plan text is empty"):
        super().__init__(message)


class MalformedInputError(PlanParseError):
    """Raised when a structured payload is undecodable or lacks its root plan."""
