"""
Policy base class for Warrant.

This module implements a Pundit-inspired policy pattern. A policy class
is responsible for one model (and, through the registry's ancestry walk,
for that model's subclasses). A fresh policy instance is constructed for
every authorization check and answers a single question: may this actor
perform this action?
"""

from __future__ import annotations

from abc import ABC
from typing import Any, Generic, TypeVar

# Type variable for the model being authorized
T = TypeVar("T")


class Policy(ABC, Generic[T]):
    """
    Abstract base class for all Warrant policies.

    Policies decide what an actor may do with a model. Following the
    Pundit pattern, methods named ``can_<action>`` define permissions for
    specific actions; actions without a method are denied.

    Attributes:
        actor: The identity performing the action (opaque to Warrant).
        action: The action token, e.g. ``"show"`` or ``"create"``.
        klass: The class being acted upon.
        instance: The instance being acted upon, or None for class-level
            checks (``index``, ``new``, ``create``).
        parent: The parent record the action is scoped to, or None.

    Example:
        >>> class AccountPolicy(Policy):
        ...     def can_index(self) -> bool:
        ...         return self.actor is not None
        ...
        ...     def can_update(self) -> bool:
        ...         return self.instance.owner_id == self.actor.id
        ...
        ...     def can_create(self) -> bool:
        ...         # Accounts are always created under a client
        ...         return self.parent is not None

    Policy instances are created, queried once and discarded. They must
    not be cached across requests.
    """

    def __init__(
        self,
        actor: Any,
        action: Any,
        klass: type[T],
        instance: T | None = None,
        parent: Any = None,
    ) -> None:
        """
        Initialize a policy instance.

        Args:
            actor: The actor making the request.
            action: The action being checked; normalized to a string token.
            klass: The class of the subject.
            instance: The subject instance. None for class-level checks.
            parent: The parent record, if the action is nested under one.
        """
        self.actor = actor
        self.action = str(action)
        self.klass = klass
        self.instance = instance
        self.parent = parent

    @property
    def subject(self) -> Any:
        """The instance when one is present, otherwise the class."""
        return self.klass if self.instance is None else self.instance

    def authorized(self) -> bool:
        """
        Decide whether the actor may perform the action.

        Looks up the ``can_<action>`` method and calls it.

        Returns:
            True if authorized, False otherwise. Missing action methods
            deny by default.
        """
        method = getattr(self, f"can_{self.action}", None)

        if method is None:
            return False

        return bool(method())

    @classmethod
    def get_available_actions(cls) -> list[str]:
        """
        Get all actions defined by this policy.

        Scans the class for methods matching the ``can_<action>`` pattern.

        Example:
            >>> class MyPolicy(Policy):
            ...     def can_show(self): return True
            ...     def can_destroy(self): return False
            >>> MyPolicy.get_available_actions()
            ['destroy', 'show']
        """
        actions = []
        for name in dir(cls):
            if name.startswith("can_") and callable(getattr(cls, name)):
                actions.append(name[4:])
        return sorted(actions)

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} action={self.action!r} "
            f"subject={self.subject!r}>"
        )
