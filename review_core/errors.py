"""Errors that are allowed to reach callers of the review core."""


class ReviewCoreError(Exception):
    """Base class for caller-visible review core errors."""


class NotFound(ReviewCoreError):
    """Raised when a snippet, session, debate or argument does not exist."""

    def __init__(self, kind: str, identifier: str) -> None:
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier}")


class InvalidState(ReviewCoreError):
    """Raised when a debate operation needs an active debate and it is not."""

    def __init__(self, debate_id: str, status: str, operation: str) -> None:
        self.debate_id = debate_id
        self.status = status
        self.operation = operation
        super().__init__(f"Cannot {operation} debate {debate_id}: status is {status}")
