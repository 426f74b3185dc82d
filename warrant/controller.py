"""
Request handler integration for Warrant.

``Trusted`` is a mixin for request handlers (controllers, views, route
classes). It declares the handler's resource at class level and provides
the three steps run before every action: set the actor, load the
resource, enforce access control.

A handler instance is expected to provide:
    action_name: The action being performed ("index", "show", ...).
    params: Raw request parameters (mapping).
    path_params: Parameters extracted from the request path (mapping).
    current_user: The authenticated actor (optional).

Example:
    >>> class AccountsController(Trusted):
    ...     pass
    >>> AccountsController.trusted(warrant)
    >>> AccountsController.belongs_to("client")
    >>>
    >>> handler = AccountsController()
    >>> handler.action_name = "show"
    >>> handler.params, handler.path_params = {}, {"client_id": "1", "id": "2"}
    >>> handler.current_user = user
    >>> handler.run_filters()
    >>> handler.account, handler.client
    (<Account id=2>, <Client id=1>)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar

import inflection

from warrant.exceptions import ConfigurationError
from warrant.inflector import underscore_path
from warrant.resource.properties import ResourceProperties
from warrant.types import AccessDecision

if TYPE_CHECKING:
    from warrant.core import Warrant
    from warrant.resource.resource import Resource

logger = logging.getLogger(__name__)

_CONTROLLER_SUFFIXES = ("Controller", "Handler", "View")


def controller_path(handler_class: type) -> str:
    """
    Default resource path for a handler class.

    ``Lottery.AssignmentsController`` becomes ``"lottery/assignments"``.
    """
    explicit = handler_class.__dict__.get("controller_path")
    if explicit:
        return str(explicit)

    *namespace, name = handler_class.__qualname__.split(".")
    for suffix in _CONTROLLER_SUFFIXES:
        if name.endswith(suffix) and name != suffix:
            name = name[: -len(suffix)]
            break
    return underscore_path("::".join([*namespace, name]))


class Trusted:
    """
    Mixin giving a request handler resource loading and access control.

    Each subclass gets its own copy of the inherited ``properties``, so
    declarations on a subclass never leak into its parent.
    """

    warrant: ClassVar[Warrant | None] = None
    properties: ClassVar[ResourceProperties]

    action_name: str = "index"
    params: Any = None
    path_params: Any = None
    current_user: Any = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "properties" in cls.__dict__:
            return
        inherited = getattr(cls, "properties", None)
        if inherited is not None:
            cls.properties = inherited.copy()
        else:
            cls.properties = ResourceProperties(
                model_name=inflection.pluralize(controller_path(cls))
            )

    # ==================== Class-level declarations ====================

    @classmethod
    def trusted(cls, warrant: Warrant) -> None:
        """Attach the Warrant instance used by this handler class."""
        cls.warrant = warrant

    @classmethod
    def model_name(cls, name: str) -> None:
        """Override the resource path derived from the class name."""
        cls.properties.model_name = name

    @classmethod
    def belongs_to(cls, *models: Any, as_: str | None = None) -> None:
        """Declare parent candidates, in priority order."""
        cls.properties.belongs_to(*models, as_=as_)

    @classmethod
    def actions(cls, **categories: Any) -> None:
        """Replace or extend action categories; see ResourceProperties.actions."""
        cls.properties.actions(**categories)

    # ==================== Instance helpers ====================

    def _warrant(self) -> Warrant:
        if self.warrant is None:
            raise ConfigurationError(
                config_key="warrant",
                expected=f"{type(self).__name__}.trusted(warrant) to be called",
            )
        return self.warrant

    @property
    def resource(self) -> Resource:
        """The resource for the current action, resolved on first access."""
        resource = self.__dict__.get("_resource")
        if resource is None:
            resource = self._warrant().resource(
                self, self.properties, self.action_name, self.params, self.path_params
            )
            self.__dict__["_resource"] = resource
        return resource

    def set_user(self) -> None:
        """Store the handler's current user as the actor for this request."""
        self._warrant().set_actor(self.current_user)

    def load_resource(self) -> None:
        self.resource.load()

    def access_control(self) -> AccessDecision:
        """
        Authorize the action on the loaded instance, or on the resource
        class when no instance is bound.

        Raises:
            AccessDenied: If the policy denies the action.
        """
        resource = self.resource
        subject = resource.instance
        if subject is None:
            subject = resource.klass
        return self._warrant().authorize(resource.action, subject, resource.parent)

    def can(self, action: Any, subject: Any = None, parent: Any = None) -> bool:
        """
        Check whether the current actor may perform ``action``.

        ``subject`` defaults to the bound instance (or the resource class)
        and ``parent`` to the bound parent.
        """
        resource = self.resource
        if subject is None:
            subject = resource.instance if resource.instance is not None else resource.klass
        if parent is None:
            parent = resource.parent
        return self._warrant().authorized(action, subject, parent)

    def run_filters(self) -> AccessDecision:
        """
        Run the before-action steps in order: actor, resource, access.

        Raises:
            AccessDenied: If access is denied.
            RecordNotFound: If the parent or member record does not exist.
        """
        self.set_user()
        self.load_resource()
        return self.access_control()
