"""
Actor context for Warrant.

The current actor is held in a ``contextvars.ContextVar``, so each thread
and each asyncio task sees its own value. Setting the actor in one
request never leaks into a concurrently running one.
"""

from __future__ import annotations

import contextvars
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

# Context variable for the current actor
_current_actor: contextvars.ContextVar[Any] = contextvars.ContextVar(
    "warrant_actor", default=None
)


def get_current_actor() -> Any:
    """Get the current actor from context."""
    return _current_actor.get()


def set_actor(actor: Any) -> contextvars.Token[Any]:
    """
    Set the actor for the current unit of work.

    Replaces any previous value in this context. The returned token can be
    passed to ``reset_actor`` to restore the previous value.
    """
    return _current_actor.set(actor)


def reset_actor(token: contextvars.Token[Any]) -> None:
    _current_actor.reset(token)


@contextmanager
def actor_context(actor: Any) -> Iterator[Any]:
    """
    Context manager to set the current actor for authorization.

    All authorization checks within this context use the provided actor
    unless one is passed explicitly.

    Example:
        >>> with actor_context(user):
        ...     gate.authorize("show", account)
    """
    token = _current_actor.set(actor)
    try:
        yield actor
    finally:
        _current_actor.reset(token)
