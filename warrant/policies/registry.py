"""
Policy registry for Warrant.

This module provides the PolicyRegistry class, which maps model classes
to the policy classes responsible for them. Resolution walks a class's
ancestry from most to least specific, so a policy registered for a base
model also governs its subclasses unless a subclass registers its own.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, Union

from warrant.inflector import NAMESPACE_SEPARATOR, model_name
from warrant.policies.builtin import DenyAllPolicy

if TYPE_CHECKING:
    from warrant.policies.base import Policy

logger = logging.getLogger(__name__)

ModelKey = Union[type, str]


class PolicyRegistry:
    """
    Registry for policy classes.

    The PolicyRegistry manages policy registration and resolution,
    enabling the authorization gate to find the policy for any class.

    Features:
        - Decorator-based registration (@registry.policy(Account))
        - Registration by class or by model name ("Lottery::Package")
        - Ancestry-ranked resolution that stops at a persistence base
        - A default policy when nothing matches (DenyAllPolicy)
        - Thread-safe operations

    Example:
        >>> registry = PolicyRegistry(persistence_base=Model)
        >>>
        >>> @registry.policy(Account)
        ... class AccountPolicy(Policy):
        ...     def can_show(self) -> bool:
        ...         return True
        >>>
        >>> registry.resolve(SecretAccount)  # no policy of its own
        <class 'AccountPolicy'>

    Thread Safety:
        All operations are thread-safe via internal locking.
    """

    def __init__(
        self,
        default_policy: type[Policy] | None = None,
        persistence_base: type = object,
    ) -> None:
        """
        Initialize the registry.

        Args:
            default_policy: Policy used when no class in the lineage has a
                registered policy. Defaults to DenyAllPolicy.
            persistence_base: Root of the model hierarchy. It and all of its
                ancestors are never considered during resolution.
        """
        self._policies: dict[ModelKey, type[Policy]] = {}
        self._default_policy: type[Policy] = default_policy or DenyAllPolicy
        self._persistence_base = persistence_base
        self._lock = threading.RLock()

    @staticmethod
    def _key(model: ModelKey) -> ModelKey:
        if isinstance(model, type):
            return model
        return str(model).replace(".", NAMESPACE_SEPARATOR)

    def policy(self, model: ModelKey) -> Any:
        """
        Decorator for registering a policy class.

        Args:
            model: The model class, or its model name, the policy handles.

        Example:
            >>> @registry.policy("Lottery::Package")
            ... class PackagePolicy(Policy):
            ...     def can_show(self) -> bool:
            ...         return True
        """
        def decorator(policy_class: type[Policy]) -> type[Policy]:
            self.register(model, policy_class)
            return policy_class
        return decorator

    def register(self, model: ModelKey, policy_class: type[Policy]) -> None:
        """
        Register a policy class for a model.

        Registering a model twice replaces the previous policy and logs a
        warning.

        Args:
            model: The model class or model name.
            policy_class: The policy class to register.
        """
        key = self._key(model)
        label = key.__name__ if isinstance(key, type) else key
        with self._lock:
            if key in self._policies:
                existing = self._policies[key].__name__
                logger.warning(
                    f"Overwriting policy for '{label}': "
                    f"{existing} -> {policy_class.__name__}"
                )

            self._policies[key] = policy_class

            logger.debug(
                f"Registered policy '{policy_class.__name__}' for model '{label}'"
            )

    def lineage(self, klass: type) -> tuple[type, ...]:
        """
        Candidate classes for ``klass``, most specific first.

        The walk follows the method resolution order and stops at the
        persistence base or at any ancestor of it. If ``klass`` itself is
        the base (or above it) the lineage is empty.

        Example:
            >>> registry.lineage(SecretAccount)
            (<class 'SecretAccount'>, <class 'Account'>)
        """
        boundary = self._persistence_base.__mro__
        candidates = []
        for ancestor in klass.__mro__:
            if ancestor in boundary:
                break
            candidates.append(ancestor)
        return tuple(candidates)

    def _lookup(self, klass: type) -> type[Policy] | None:
        policy_class = self._policies.get(klass)
        if policy_class is None:
            policy_class = self._policies.get(model_name(klass))
        return policy_class

    def resolve(self, klass: type) -> type[Policy]:
        """
        Find the policy class responsible for ``klass``.

        Each class in the lineage is probed for a policy registered by
        class, then by model name. The first hit wins. When nothing in the
        lineage has a policy the default policy is returned; resolution
        never raises.

        Args:
            klass: The class being authorized.

        Returns:
            The policy class to instantiate.
        """
        with self._lock:
            for ancestor in self.lineage(klass):
                policy_class = self._lookup(ancestor)
                if policy_class is not None:
                    logger.debug(
                        f"Authorizing class for {klass.__name__} is "
                        f"{policy_class.__name__} (via {ancestor.__name__})"
                    )
                    return policy_class

            logger.debug(
                f"No policy for '{klass.__name__}', using default: "
                f"{self._default_policy.__name__}"
            )
            return self._default_policy

    def has_policy(self, model: ModelKey) -> bool:
        """Check if a policy is registered directly for a model."""
        with self._lock:
            return self._key(model) in self._policies

    def list_policies(self) -> dict[str, str]:
        """
        List all registered policies.

        Returns:
            Dictionary mapping model names to policy class names.

        Example:
            >>> registry.list_policies()
            {'Account': 'AccountPolicy', 'Lottery::Package': 'PackagePolicy'}
        """
        with self._lock:
            return {
                (model_name(key) if isinstance(key, type) else key): policy.__name__
                for key, policy in self._policies.items()
            }

    def unregister(self, model: ModelKey) -> bool:
        """
        Unregister the policy for a model.

        Returns:
            True if a policy was unregistered, False if none was registered.
        """
        key = self._key(model)
        with self._lock:
            if key in self._policies:
                del self._policies[key]
                logger.debug(f"Unregistered policy for model '{key}'")
                return True
            return False

    def clear(self) -> None:
        """
        Clear all registered policies.

        Useful for testing or reconfiguration.
        """
        with self._lock:
            self._policies.clear()
            logger.debug("Cleared all registered policies")

    @property
    def default_policy(self) -> type[Policy]:
        return self._default_policy

    def set_default_policy(self, policy_class: type[Policy] | None) -> None:
        """Set the default policy; None restores DenyAllPolicy."""
        with self._lock:
            self._default_policy = policy_class or DenyAllPolicy
            logger.debug(f"Set default policy to '{self._default_policy.__name__}'")

    @property
    def persistence_base(self) -> type:
        return self._persistence_base

    def set_persistence_base(self, base: type) -> None:
        """Set the root of the model hierarchy used to bound resolution."""
        with self._lock:
            self._persistence_base = base


# Global registry instance for convenience
_global_registry: PolicyRegistry | None = None
_global_registry_lock = threading.Lock()


def get_global_registry() -> PolicyRegistry:
    """
    Get the global policy registry instance.

    Creates one if it doesn't exist. This provides a convenient
    singleton for simple use cases.
    """
    global _global_registry
    if _global_registry is not None:
        return _global_registry
    with _global_registry_lock:
        # Double-check after acquiring lock
        if _global_registry is None:
            _global_registry = PolicyRegistry()
        return _global_registry


def reset_global_registry() -> None:
    """
    Reset the global registry.

    Clears the global registry instance. Primarily useful for testing.
    """
    global _global_registry
    with _global_registry_lock:
        if _global_registry is not None:
            _global_registry.clear()
        _global_registry = None
