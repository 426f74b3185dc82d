"""
Authorization gate for Warrant.

The gate answers "may the current actor perform this action on this
subject?" It resolves the responsible policy class through the registry,
constructs a fresh policy instance and asks it for a decision. The
enforcing variant turns a negative decision into ``AccessDenied``.
"""

from __future__ import annotations

import logging
from typing import Any, NoReturn

from warrant.context import get_current_actor, set_actor
from warrant.exceptions import AccessDenied
from warrant.policies.registry import PolicyRegistry, get_global_registry
from warrant.types import AccessDecision, Target

logger = logging.getLogger(__name__)

# Sentinel meaning "read the actor from the current context"
CURRENT_ACTOR: Any = object()


class Authorization:
    """
    Evaluates authorization decisions against a policy registry.

    Every check builds a new policy from ``(actor, action, class,
    instance, parent)``; nothing is cached between checks. The actor is
    read from the context slot unless passed explicitly with ``actor=``.

    Example:
        >>> gate = Authorization(registry)
        >>> gate.set_actor(current_user)
        >>> gate.authorized("show", account, client)
        True
        >>> gate.authorize("destroy", account, client)
        Traceback (most recent call last):
        ...
        warrant.exceptions.AccessDenied: You are not authorized ...
    """

    def __init__(self, registry: PolicyRegistry | None = None) -> None:
        self._registry = registry if registry is not None else get_global_registry()

    @property
    def registry(self) -> PolicyRegistry:
        return self._registry

    # ==================== Actor ====================

    @property
    def actor(self) -> Any:
        """The actor used when none is passed explicitly."""
        return get_current_actor()

    def set_actor(self, actor: Any) -> None:
        """Set the actor for the current unit of work (thread or task)."""
        set_actor(actor)

    # ==================== Decisions ====================

    def check(
        self,
        action: Any,
        subject: Any,
        parent: Any = None,
        *,
        actor: Any = CURRENT_ACTOR,
    ) -> AccessDecision:
        """
        Check authorization and return a detailed decision.

        Args:
            action: The action to check (e.g. "show", "create").
            subject: A class (collection/creation checks) or an instance
                (member checks).
            parent: Optional parent record the action is scoped to.
            actor: Explicit actor; defaults to the current context's actor.

        Returns:
            AccessDecision describing the outcome. Errors raised inside the
            policy are logged and reported as a denial.
        """
        if actor is CURRENT_ACTOR:
            actor = get_current_actor()

        target = Target.of(subject)
        action_token = str(action)
        policy_class = self._registry.resolve(target.klass)
        policy_name = policy_class.__name__

        try:
            policy = policy_class(
                actor, action_token, target.klass, target.instance, parent
            )
            allowed = bool(policy.authorized())
        except Exception as e:
            logger.error(f"Policy {policy_name} raised while checking '{action_token}': {e}")
            return AccessDecision.deny(
                action=action_token,
                subject=target.subject,
                reason=f"Policy evaluation failed: {e}",
                policy=policy_name,
                metadata={"error_type": type(e).__name__},
            )

        reason = f"Policy {policy_name} returned {allowed}"
        logger.debug(
            f"{reason} for '{action_token}' on {target.klass.__name__}"
        )
        if allowed:
            return AccessDecision.allow(
                action=action_token, subject=target.subject,
                reason=reason, policy=policy_name,
            )
        return AccessDecision.deny(
            action=action_token, subject=target.subject,
            reason=reason, policy=policy_name,
        )

    def authorized(
        self,
        action: Any,
        subject: Any,
        parent: Any = None,
        *,
        actor: Any = CURRENT_ACTOR,
    ) -> bool:
        """
        Check if the actor may perform ``action`` on ``subject``.

        This is a simple boolean check that never raises for a denial.

        Example:
            >>> if gate.authorized("update", account):
            ...     account.save()
        """
        return self.check(action, subject, parent, actor=actor).allowed

    def authorize(
        self,
        action: Any,
        subject: Any,
        parent: Any = None,
        message: str | None = None,
        *,
        actor: Any = CURRENT_ACTOR,
    ) -> AccessDecision:
        """
        Check authorization and raise if denied.

        Args:
            action: The action to check.
            subject: Class or instance being acted upon.
            parent: Optional parent record.
            message: Optional message replacing the default denial text.
            actor: Explicit actor; defaults to the current context's actor.

        Returns:
            The allowing AccessDecision.

        Raises:
            AccessDenied: If the policy denies the action.
        """
        decision = self.check(action, subject, parent, actor=actor)
        if not decision.allowed:
            self.access_denied(message, action, decision.subject)
        return decision

    def access_denied(
        self,
        message: str | None = None,
        action: Any = None,
        subject: Any = None,
    ) -> NoReturn:
        """Raise the structured access-denied failure."""
        raise AccessDenied(message, action, subject)
