"""
Core type definitions for Warrant.

This module defines the small value objects passed between the
authorization gate and its callers: the normalized target of an action
and the decision produced for it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Target:
    """
    The subject of an action, normalized into class and instance.

    A collection or creation context only has a class; a member context
    has an instance together with its runtime class. Exactly one of the
    two shapes is populated.

    Attributes:
        klass: The class being acted upon.
        instance: The instance being acted upon, or None.

    Example:
        >>> Target.of(Account)
        Target(klass=<class 'Account'>, instance=None)
        >>> Target.of(account).klass is Account
        True
    """
    klass: type
    instance: Any = None

    @classmethod
    def of(cls, object_or_class: Any) -> Target:
        """Build a target from either a class or an instance."""
        if isinstance(object_or_class, type):
            return cls(klass=object_or_class)
        return cls(klass=type(object_or_class), instance=object_or_class)

    @property
    def subject(self) -> Any:
        """The instance if present, otherwise the class."""
        return self.klass if self.instance is None else self.instance

    @property
    def is_member(self) -> bool:
        return self.instance is not None


@dataclass(frozen=True)
class AccessDecision:
    """
    Result of an authorization check.

    Captures whether the action was allowed, the reason for the decision,
    and which policy produced it.

    Attributes:
        allowed: Whether the action is authorized.
        action: The action token that was checked.
        subject: The instance or class that was checked.
        reason: Human-readable explanation of the decision.
        policy: Name of the policy class that was evaluated.
        metadata: Additional information about the decision.

    Example:
        >>> decision = AccessDecision.allow(
        ...     "show", account, reason="AccountPolicy.can_show returned True"
        ... )
        >>> bool(decision)
        True
    """
    allowed: bool
    action: str | None = None
    subject: Any = None
    reason: str | None = None
    policy: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.allowed

    @classmethod
    def allow(cls, action: str | None = None, subject: Any = None,
              reason: str | None = None,
              policy: str | None = None) -> AccessDecision:
        """Create an allowed decision."""
        return cls(allowed=True, action=action, subject=subject,
                   reason=reason, policy=policy)

    @classmethod
    def deny(cls, action: str | None = None, subject: Any = None,
             reason: str | None = None,
             policy: str | None = None,
             metadata: dict[str, Any] | None = None) -> AccessDecision:
        """Create a denied decision."""
        return cls(allowed=False, action=action, subject=subject,
                   reason=reason, policy=policy, metadata=metadata or {})

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        if isinstance(self.subject, type):
            subject = self.subject.__name__
        elif self.subject is None:
            subject = None
        else:
            subject = type(self.subject).__name__
        return {
            "allowed": self.allowed,
            "action": self.action,
            "subject": subject,
            "reason": self.reason,
            "policy": self.policy,
            "metadata": self.metadata,
        }
