"""
Error taxonomy shared by all kanban use cases.

The HTTP layer maps these to status codes (see ``app.main``); nothing below
knows about transport.
"""


class KanbanError(Exception):
    pass


class NotFoundError(KanbanError):
    """Entity or one of its ancestors is missing or belongs to someone else.

    Raised the same way for every link of the ownership chain so callers
    cannot probe for other users' boards.
    """


class ConflictError(KanbanError):
    """Uniqueness violation surfaced from persistence (e.g. duplicate email)."""


class KanbanValidationError(KanbanError, ValueError):
    pass


class TransientError(KanbanError):
    """Persistence failure (connection loss, deadlock, ...). Never retried here."""


class DeadlineExceededError(TransientError):
    pass
