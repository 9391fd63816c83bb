"""
Domain error taxonomy.

Every failure raised by the tracking engine is one of three kinds. The API layer
maps each kind to an HTTP status; nothing in the engine retries them.
"""


class DomainError(Exception):
    """Base class for domain-specific errors."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(DomainError):
    """Referenced deck, viewer or session does not exist (or the deck is inactive)."""

    def __init__(self, message: str, code: str = "NOT_FOUND"):
        super().__init__(message, code)


class InvalidInputError(DomainError):
    """Missing or malformed correlation ids or values on a write-path call."""

    def __init__(self, message: str, code: str = "INVALID_INPUT"):
        super().__init__(message, code)


class ConflictError(DomainError):
    """Uniqueness violation or a write against terminal state."""

    def __init__(self, message: str, code: str = "CONFLICT"):
        super().__init__(message, code)


class DeckNotFoundError(NotFoundError):
    def __init__(self, deck_id):
        super().__init__(f"Deck {deck_id} not found", "DECK_NOT_FOUND")


class DeckInactiveError(NotFoundError):
    """Share link has been switched off by the owner."""

    def __init__(self, deck_id):
        super().__init__(f"Deck {deck_id} not found or inactive", "DECK_INACTIVE")


class ViewerNotFoundError(NotFoundError):
    def __init__(self, viewer_id):
        super().__init__(f"Viewer {viewer_id} not found", "VIEWER_NOT_FOUND")


class SessionNotFoundError(NotFoundError):
    def __init__(self, session_id):
        super().__init__(f"Session {session_id} not found", "SESSION_NOT_FOUND")


class SessionClosedError(ConflictError):
    def __init__(self, session_id):
        super().__init__(
            f"Session {session_id} has ended; open a new session to keep tracking",
            "SESSION_CLOSED",
        )
