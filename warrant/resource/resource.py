"""
Resource binding for Warrant.

``Resource`` ties the resolvers together for one request: it resolves the
parent (when parents are declared), then the primary resource and its
relation, and ``load`` materializes the parent and the record onto the
request handler before access control runs.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from warrant.exceptions import ConfigurationError
from warrant.resource.info import ParentResourceInfo, PrimaryResourceInfo
from warrant.resource.properties import ActionCategory

if TYPE_CHECKING:
    from warrant.persistence.base import ModelAdapter
    from warrant.resource.properties import ResourceProperties

logger = logging.getLogger(__name__)


class Resource:
    """
    The resource an action operates on, bound to a request handler.

    Records are exposed as attributes of ``context`` (the request handler)
    named after the resource: ``context.account`` for the instance,
    ``context.accounts`` for a collection and ``context.client`` for the
    parent.

    Args:
        context: Object receiving the bound records.
        properties: Declared resource configuration.
        action: The action being performed.
        params: Raw request parameters.
        path_params: Parameters extracted from the request path.
        adapter: Persistence adapter.

    Raises:
        ConfigurationError: If no model name is declared, it cannot be
            classified, or a binding name is already defined on the
            class of ``context``.
        RecordNotFound: If a parent id in the path does not exist.

    Example:
        >>> resource = Resource(handler, properties, "create",
        ...                     {"account": {"name": "Acme"}},
        ...                     {"client_id": "7"}, adapter)
        >>> resource.load()
        >>> handler.account.client_id
        7
    """

    def __init__(
        self,
        context: Any,
        properties: ResourceProperties,
        action: Any,
        params: Mapping[str, Any] | None,
        path_params: Mapping[str, Any] | None,
        adapter: ModelAdapter,
    ) -> None:
        if not properties.model_name:
            raise ConfigurationError(
                config_key="model_name",
                expected="a resource path such as 'accounts'",
                received=properties.model_name,
            )

        self.action = str(action)
        self.context = context
        self.properties = properties
        self.params = params or {}
        self.path_params = path_params or {}
        self.adapter = adapter

        self.parent_info: ParentResourceInfo | None = None
        if properties.has_associations:
            self.parent_info = ParentResourceInfo(
                properties.associations, self.params, self.path_params, adapter
            )
        self.info = PrimaryResourceInfo(properties.model_name, self.params, adapter)
        for name in (self.instance_name, self.plural_instance_name, self.parent_name):
            self._check_binding(name)
        self.relation = self.info.relation(self.parent_info)

    def _check_binding(self, name: str | None) -> None:
        """Reject a binding name the context's class already defines."""
        if name and hasattr(type(self.context), name):
            raise ConfigurationError(
                config_key="binding",
                expected=f"a name not already defined on {type(self.context).__name__}",
                received=name,
            )

    # Handler accessors

    @property
    def instance(self) -> Any:
        return getattr(self.context, self.instance_name, None)

    @instance.setter
    def instance(self, instance: Any) -> None:
        setattr(self.context, self.instance_name, instance)

    @property
    def instances(self) -> Any:
        return getattr(self.context, self.plural_instance_name, None)

    @instances.setter
    def instances(self, instances: Any) -> None:
        setattr(self.context, self.plural_instance_name, instances)

    @property
    def parent(self) -> Any:
        name = self.parent_name
        return getattr(self.context, name, None) if name else None

    @parent.setter
    def parent(self, instance: Any) -> None:
        name = self.parent_name
        if name:
            setattr(self.context, name, instance)

    @property
    def instantiated(self) -> Any:
        instances = self.instances
        return instances if instances is not None else self.instance

    @property
    def klass(self) -> type:
        return self.info.klass

    @property
    def instance_params(self) -> Any:
        return self.info.params

    @property
    def instance_name(self) -> str:
        return self.info.name

    @property
    def plural_instance_name(self) -> str:
        return self.info.plural_name

    @property
    def parent_name(self) -> str | None:
        if self.parent_info is None:
            return None
        return self.parent_info.name

    @property
    def category(self) -> ActionCategory | None:
        return self.properties.category_for(self.action)

    def load(self) -> Any:
        """
        Bind the parent and the action's record onto the handler.

        - new-style actions build an unsaved record from the relation and
          the resource's parameters;
        - member-style actions find the record by the ``id`` path parameter;
        - collection-style (and undeclared) actions bind no record.

        An already bound record is kept. When the handler defines a
        ``build(action)`` method it is called afterwards.

        Returns:
            The bound collection or instance, if any.

        Raises:
            RecordNotFound: If a member record does not exist.
        """
        if self.parent_info:
            self.parent = self.parent_info.object

        category = self.category
        if category is ActionCategory.NEW:
            logger.debug(f"Building new {self.instance_name}: params={self.instance_params!r}")
            if self.instance is None:
                self.instance = self.adapter.new(self.relation, self.instance_params)
        elif category is ActionCategory.MEMBER:
            logger.debug(
                f"Finding {self.instance_name}: parent={self.parent!r}, "
                f"relation={self.relation!r}"
            )
            if self.instance is None:
                self.instance = self.adapter.find(self.relation, self.path_params.get("id"))

        build = getattr(self.context, "build", None)
        if callable(build):
            build(self.action)

        return self.instantiated

    def __repr__(self) -> str:
        return (
            f"<Resource action={self.action!r} resource={self.info.path!r} "
            f"parent={self.parent_name!r}>"
        )
