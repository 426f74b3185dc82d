"""
Built-in policies for Warrant.

``DenyAllPolicy`` is the registry's default when no policy is found for
a class or any of its ancestors. ``AllowAllPolicy`` exists for tests and
development setups.
"""

from __future__ import annotations

import logging
from typing import Any

from warrant.policies.base import Policy

logger = logging.getLogger(__name__)


class DenyAllPolicy(Policy[Any]):
    """
    Policy that denies all actions.

    This is the safest default policy - it denies everything unless a
    more specific policy is registered for the model or one of its
    ancestors.

    Example:
        >>> registry = PolicyRegistry(default_policy=DenyAllPolicy)
        >>> # Any model without a policy will be denied
    """

    def authorized(self) -> bool:
        """Deny every action, including ones without a ``can_`` method."""
        logger.debug(
            f"DenyAllPolicy: denying '{self.action}' on {self.klass.__name__}"
        )
        return False


class AllowAllPolicy(Policy[Any]):
    """
    Policy that allows all actions.

    WARNING: This policy should ONLY be used for testing or in
    development environments. A warning is logged every time it is
    instantiated to help catch accidental production usage.
    """

    def __init__(
        self,
        actor: Any,
        action: Any,
        klass: type,
        instance: Any = None,
        parent: Any = None,
    ) -> None:
        super().__init__(actor, action, klass, instance, parent)
        logger.warning(
            f"AllowAllPolicy instantiated for {klass.__name__}. "
            "This policy allows ALL actions and should NOT be used in production!"
        )

    def authorized(self) -> bool:
        return True
