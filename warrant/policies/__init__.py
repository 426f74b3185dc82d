"""
Policy system for Warrant.

This module provides the Pundit-inspired policy pattern for defining
authorization rules. Policies are classes that decide what an actor may
do with a model; the registry finds the right policy for any class by
walking its ancestry.

Quick Start:
    >>> from warrant.policies import Policy, PolicyRegistry
    >>>
    >>> registry = PolicyRegistry(persistence_base=Model)
    >>>
    >>> @registry.policy(Account)
    ... class AccountPolicy(Policy):
    ...     def can_show(self) -> bool:
    ...         return True
    ...
    ...     def can_destroy(self) -> bool:
    ...         return "admin" in self.actor.roles
    >>>
    >>> policy_class = registry.resolve(SecretAccount)
    >>> policy_class(user, "show", SecretAccount, account).authorized()
    True
"""

from warrant.policies.base import Policy
from warrant.policies.builtin import AllowAllPolicy, DenyAllPolicy
from warrant.policies.registry import (
    PolicyRegistry,
    get_global_registry,
    reset_global_registry,
)

__all__ = [
    # Base class
    "Policy",
    # Registry
    "PolicyRegistry",
    "get_global_registry",
    "reset_global_registry",
    # Built-in policies
    "DenyAllPolicy",
    "AllowAllPolicy",
]
