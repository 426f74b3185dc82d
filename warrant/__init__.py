"""
Warrant: authorization and resource resolution for request handlers.

Warrant decides whether the current actor may perform an action on a
model, a record or a record nested under a parent. Before deciding, it
resolves which model class, record and parent a request is about from
namespaced, polymorphic request parameters.

Basic Usage:
    >>> from warrant import Policy, Warrant, WarrantConfig
    >>> from warrant.persistence import InMemoryAdapter, Model
    >>>
    >>> warrant = Warrant(
    ...     adapter=InMemoryAdapter(Client, Account),
    ...     config=WarrantConfig(persistence_base=Model),
    ... )
    >>>
    >>> @warrant.policy(Account)
    ... class AccountPolicy(Policy):
    ...     def can_show(self) -> bool:
    ...         return self.instance.owner_id == self.actor.id
    >>>
    >>> with warrant.actor_context(user):
    ...     warrant.authorize("show", account)
"""

__version__ = "0.1.0"

from warrant.authorization import Authorization
from warrant.config import WarrantConfig
from warrant.context import (
    actor_context,
    get_current_actor,
    reset_actor,
    set_actor,
)
from warrant.controller import Trusted
from warrant.core import Warrant
from warrant.exceptions import (
    AccessDenied,
    AdapterNotAvailableError,
    ConfigurationError,
    RecordNotFound,
    WarrantError,
)
from warrant.policies import (
    AllowAllPolicy,
    DenyAllPolicy,
    Policy,
    PolicyRegistry,
    get_global_registry,
    reset_global_registry,
)
from warrant.resource import (
    ActionCategory,
    ParentResourceInfo,
    PrimaryResourceInfo,
    Resource,
    ResourceInfo,
    ResourceProperties,
)
from warrant.types import AccessDecision, Target

__all__ = [
    # Version
    "__version__",
    # Main class
    "Warrant",
    "WarrantConfig",
    "Authorization",
    # Policies
    "Policy",
    "PolicyRegistry",
    "DenyAllPolicy",
    "AllowAllPolicy",
    "get_global_registry",
    "reset_global_registry",
    # Resources
    "Resource",
    "ResourceInfo",
    "PrimaryResourceInfo",
    "ParentResourceInfo",
    "ResourceProperties",
    "ActionCategory",
    # Handler integration
    "Trusted",
    # Core types
    "AccessDecision",
    "Target",
    # Exceptions
    "WarrantError",
    "AccessDenied",
    "RecordNotFound",
    "ConfigurationError",
    "AdapterNotAvailableError",
    # Context helpers
    "actor_context",
    "get_current_actor",
    "set_actor",
    "reset_actor",
]
