"""
Cancellation module.

Provides a thread-safe cancellation signal that is passed through the
resolution pipeline and checked at every remote call boundary.
"""

import threading
from typing import Optional

from src.core.exceptions import ResolutionCancelledError


class CancellationToken:
    """
    Cooperative cancellation signal.

    Example:
        >>> token = CancellationToken()
        >>> token.raise_if_cancelled()  # no-op
        >>> token.cancel('library scan stopped')
        >>> token.raise_if_cancelled()  # raises ResolutionCancelledError
    """

    def __init__(self):
        self._event = threading.Event()
        self._reason: Optional[str] = None

    @property
    def is_cancelled(self) -> bool:
        """Check if cancellation was requested."""
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        """Return the reason given to ``cancel``, if any."""
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cancellation."""
        self._reason = reason
        self._event.set()

    def raise_if_cancelled(self) -> None:
        """
        Raise if cancellation was requested.

        Raises:
            ResolutionCancelledError: If ``cancel`` has been called.
        """
        if self._event.is_set():
            context = {'reason': self._reason} if self._reason else None
            raise ResolutionCancelledError(context=context)


def ensure_token(token: Optional[CancellationToken]) -> CancellationToken:
    """Return the given token, or a fresh one that is never cancelled."""
    return token if token is not None else CancellationToken()
