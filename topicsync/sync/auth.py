"""Observable authentication state.

AuthState carries two push-based signals and no other logic: whether the
session is authenticated, and the current credential token. Subscribers are
called with ``(old, new)`` only when a value actually changes.
"""

import logging
from typing import Callable, Generic, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[T, T], None]


class Observable(Generic[T]):
    """A value that notifies subscribers when it changes."""

    def __init__(self, value: T, name: str = ""):
        self._value = value
        self.name = name
        self._listeners: List[Listener] = []

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        old = self._value
        if old == value:
            return
        self._value = value
        for listener in list(self._listeners):
            try:
                listener(old, value)
            except Exception as e:
                # Listeners are isolated from each other
                logger.warning(
                    f"Listener on {self.name or 'observable'} failed: {e}",
                    extra={"signal": self.name, "error_type": type(e).__name__},
                )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


class AuthState:
    """The two auth signals observed by the sync trigger."""

    def __init__(self, is_authenticated: bool = False, token: Optional[str] = None):
        self.is_authenticated: Observable[bool] = Observable(
            bool(is_authenticated), name="is_authenticated"
        )
        self.token: Observable[Optional[str]] = Observable(token, name="token")

    def login(self, token: str) -> None:
        """Record a successful login.

        The token is published before the authenticated flag, the same
        order a login flow stores them in.
        """
        self.token.set(token)
        self.is_authenticated.set(True)

    def logout(self) -> None:
        self.is_authenticated.set(False)
        self.token.set(None)
