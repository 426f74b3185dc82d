"""
Core Warrant class.

This module provides the main entry point for the library, wiring the
policy registry, the authorization gate and a persistence adapter into a
single object that request handlers share.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from warrant.authorization import CURRENT_ACTOR, Authorization
from warrant.config import WarrantConfig
from warrant.context import actor_context, get_current_actor, set_actor
from warrant.persistence import AdapterFactory
from warrant.persistence.base import ModelAdapter
from warrant.policies.base import Policy
from warrant.policies.registry import ModelKey, PolicyRegistry
from warrant.resource.properties import ResourceProperties
from warrant.resource.resource import Resource
from warrant.types import AccessDecision

logger = logging.getLogger(__name__)


class Warrant:
    """
    Main entry point for Warrant.

    Features:
        - Pundit-style policies resolved through the model's ancestry
        - Per-request actor held in a context variable
        - Parent and subclass resolution from request parameters
        - Pluggable persistence adapters (in-memory, SQLAlchemy)

    Example:
        >>> warrant = Warrant(adapter=InMemoryAdapter(Client, Account),
        ...                   config=WarrantConfig(persistence_base=Model))
        >>>
        >>> @warrant.policy(Account)
        ... class AccountPolicy(Policy):
        ...     def can_show(self) -> bool:
        ...         return self.actor is not None
        >>>
        >>> with warrant.actor_context(user):
        ...     warrant.authorize("show", account)
    """

    def __init__(
        self,
        adapter: ModelAdapter | None = None,
        config: WarrantConfig | None = None,
        registry: PolicyRegistry | None = None,
    ) -> None:
        """
        Initialize Warrant.

        Args:
            adapter: Persistence adapter. When None, one is created from
                ``config.adapter`` and ``config.adapter_options``.
            config: Library configuration.
            registry: Policy registry to use instead of a fresh one.
        """
        self.config = config or WarrantConfig()
        self.config.apply_logging()

        self._registry = registry or PolicyRegistry(
            default_policy=self.config.default_policy,
            persistence_base=self.config.persistence_base,
        )
        self._authorization = Authorization(self._registry)

        if adapter is None:
            adapter = AdapterFactory.create(self.config.adapter, **self.config.adapter_options)
        self._adapter = adapter

        logger.debug(
            f"Warrant initialized with {type(adapter).__name__}, "
            f"default policy {self._registry.default_policy.__name__}"
        )

    @property
    def registry(self) -> PolicyRegistry:
        return self._registry

    @property
    def adapter(self) -> ModelAdapter:
        return self._adapter

    @property
    def authorization(self) -> Authorization:
        return self._authorization

    # ==================== Policy Registration ====================

    def policy(self, model: ModelKey) -> Callable[[type[Policy]], type[Policy]]:
        """
        Decorator to register a policy class for a model.

        Example:
            >>> @warrant.policy(Account)
            ... class AccountPolicy(Policy):
            ...     def can_index(self) -> bool:
            ...         return True
        """
        return self._registry.policy(model)

    def register_policy(self, model: ModelKey, policy_class: type[Policy]) -> None:
        self._registry.register(model, policy_class)

    def resolve_policy(self, klass: type) -> type[Policy]:
        return self._registry.resolve(klass)

    # ==================== Actor ====================

    @property
    def actor(self) -> Any:
        return get_current_actor()

    def set_actor(self, actor: Any) -> None:
        set_actor(actor)

    @contextmanager
    def actor_context(self, actor: Any) -> Iterator[Any]:
        """
        Context manager to set the current actor for authorization.

        Example:
            >>> with warrant.actor_context(user):
            ...     warrant.authorized("show", account)
        """
        with actor_context(actor) as current:
            yield current

    # ==================== Authorization Methods ====================

    def check(self, action: Any, subject: Any, parent: Any = None, *,
              actor: Any = CURRENT_ACTOR) -> AccessDecision:
        return self._authorization.check(action, subject, parent, actor=actor)

    def authorized(self, action: Any, subject: Any, parent: Any = None, *,
                   actor: Any = CURRENT_ACTOR) -> bool:
        """Check if the actor may perform an action; never raises on denial."""
        return self._authorization.authorized(action, subject, parent, actor=actor)

    def authorize(self, action: Any, subject: Any, parent: Any = None,
                  message: str | None = None, *,
                  actor: Any = CURRENT_ACTOR) -> AccessDecision:
        """
        Check authorization and raise AccessDenied if denied.

        Raises:
            AccessDenied: If the policy denies the action.
        """
        return self._authorization.authorize(action, subject, parent, message, actor=actor)

    # ==================== Resources ====================

    def resource(
        self,
        context: Any,
        properties: ResourceProperties,
        action: Any,
        params: Mapping[str, Any] | None = None,
        path_params: Mapping[str, Any] | None = None,
    ) -> Resource:
        """
        Resolve the resource for one request.

        Args:
            context: Object the resolved records are bound onto.
            properties: Declared resource configuration.
            action: The action being performed.
            params: Raw request parameters.
            path_params: Parameters extracted from the request path.
        """
        return Resource(context, properties, action, params, path_params, self._adapter)
