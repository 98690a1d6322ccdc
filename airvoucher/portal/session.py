"""Signed-in session state shared by the portal views."""
from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock
from types import TracebackType

from airvoucher.models import UserRole


@dataclass(slots=True, frozen=True)
class SessionRecord:
    user_id: str
    email: str
    role: UserRole


SessionListener = Callable[[SessionRecord | None], None]


class SessionStatus(str, enum.Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    CLOSED = "closed"


class Subscription:
    """Handle returned by :meth:`SessionContext.subscribe`.

    Use it as a context manager to release the listener when the block exits.
    """

    def __init__(self, context: SessionContext, listener: SessionListener) -> None:
        self._context = context
        self._listener = listener
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if self._active:
            self._active = False
            self._context._remove(self._listener)

    def __enter__(self) -> Subscription:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.unsubscribe()


class SessionContext:
    """Holds the current :class:`SessionRecord` and notifies subscribers on change."""

    def __init__(self) -> None:
        self._current: SessionRecord | None = None
        self._status = SessionStatus.UNINITIALIZED
        self._listeners: list[SessionListener] = []
        self._lock = Lock()

    @property
    def current(self) -> SessionRecord | None:
        return self._current

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def subscribe(self, listener: SessionListener) -> Subscription:
        with self._lock:
            if self._status is SessionStatus.CLOSED:
                raise RuntimeError("Session context is closed")
            self._listeners.append(listener)
        return Subscription(self, listener)

    def set(self, session: SessionRecord | None) -> None:
        """Replace the current session and notify every subscriber."""
        with self._lock:
            if self._status is SessionStatus.CLOSED:
                raise RuntimeError("Session context is closed")
            self._current = session
            self._status = SessionStatus.READY
            listeners = list(self._listeners)
        for listener in listeners:
            listener(session)

    def clear(self) -> None:
        self.set(None)

    def close(self) -> None:
        """Drop every subscriber. The context cannot be used afterwards."""
        with self._lock:
            self._listeners.clear()
            self._current = None
            self._status = SessionStatus.CLOSED

    def _remove(self, listener: SessionListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)


__all__ = ["SessionContext", "SessionListener", "SessionRecord", "SessionStatus", "Subscription"]
