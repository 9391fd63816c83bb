"""
Viewing session state value object.
"""

from enum import Enum


class SessionState(str, Enum):
    """
    Lifecycle of a viewing session.

    A session is opened on first page load and closed when the tab goes away.
    CLOSED is terminal: reopening means a brand-new session.
    """

    OPEN = "open"
    CLOSED = "closed"

    def accepts_navigation(self) -> bool:
        return self is SessionState.OPEN
