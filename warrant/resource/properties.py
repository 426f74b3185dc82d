"""
Resource declarations for Warrant.

``ResourceProperties`` holds what a request handler declares about the
resource it serves: the model identifier, the parent associations it may
be nested under, and which actions build, load or only list records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from warrant.exceptions import ConfigurationError
from warrant.inflector import model_name as model_name_of


class ActionCategory(str, Enum):
    """How an action materializes its resource."""

    NEW = "new"
    MEMBER = "member"
    COLLECTION = "collection"


DEFAULT_NEW_ACTIONS = ("new", "create")
DEFAULT_MEMBER_ACTIONS = ("show", "edit", "update", "destroy")
DEFAULT_COLLECTION_ACTIONS = ("index",)


@dataclass
class ResourceProperties:
    """
    Declared configuration for one resource.

    Attributes:
        model_name: Resource path identifying the model, singular or
            plural, optionally namespaced (``"lottery/packages"``).
        associations: Ordered ``(model, alias)`` candidates for the parent.
            Earlier entries win when a request matches more than one.
        new_actions: Actions that build an unsaved record.
        member_actions: Actions that load one record by id.
        collection_actions: Actions that load no single record.

    Example:
        >>> properties = ResourceProperties("accounts")
        >>> properties.belongs_to("client", "lottery/package", as_="accounts")
        >>> properties.actions(add_member=["close"])
        >>> properties.category_for("close")
        <ActionCategory.MEMBER: 'member'>
    """

    model_name: str | None = None
    associations: list[tuple[Any, str | None]] = field(default_factory=list)
    new_actions: list[str] = field(default_factory=lambda: list(DEFAULT_NEW_ACTIONS))
    member_actions: list[str] = field(default_factory=lambda: list(DEFAULT_MEMBER_ACTIONS))
    collection_actions: list[str] = field(
        default_factory=lambda: list(DEFAULT_COLLECTION_ACTIONS)
    )

    def __post_init__(self) -> None:
        self.new_actions = [str(a) for a in self.new_actions]
        self.member_actions = [str(a) for a in self.member_actions]
        self.collection_actions = [str(a) for a in self.collection_actions]
        self._validate()

    def _validate(self) -> None:
        seen: dict[str, str] = {}
        for category, actions in (
            ("new", self.new_actions),
            ("member", self.member_actions),
            ("collection", self.collection_actions),
        ):
            for action in actions:
                if action in seen and seen[action] != category:
                    raise ConfigurationError(
                        config_key=f"actions.{action}",
                        expected="exactly one category per action",
                        received=f"{seen[action]} and {category}",
                    )
                seen[action] = category

    @property
    def has_associations(self) -> bool:
        return bool(self.associations)

    def belongs_to(self, *models: Any, as_: str | None = None) -> ResourceProperties:
        """
        Declare parent candidates.

        Args:
            *models: Model classes or identifiers (``"client"``).
            as_: Association name on the parent used to scope this resource.
                Applies to every model in this call.
        """
        for model in models:
            self.associations.append((model, as_))
        return self

    def actions(
        self,
        new: list[str] | None = None,
        member: list[str] | None = None,
        collection: list[str] | None = None,
        add_new: list[str] | None = None,
        add_member: list[str] | None = None,
        add_collection: list[str] | None = None,
    ) -> ResourceProperties:
        """
        Replace or extend the action categories.

        ``new``/``member``/``collection`` replace a category; the ``add_``
        variants append to it.

        Raises:
            ConfigurationError: If an action ends up in two categories.
        """
        if new is not None:
            self.new_actions = [str(a) for a in new]
        if member is not None:
            self.member_actions = [str(a) for a in member]
        if collection is not None:
            self.collection_actions = [str(a) for a in collection]
        self.new_actions.extend(str(a) for a in add_new or ())
        self.member_actions.extend(str(a) for a in add_member or ())
        self.collection_actions.extend(str(a) for a in add_collection or ())
        self._validate()
        return self

    def category_for(self, action: Any) -> ActionCategory | None:
        """The category of ``action``, or None when it is undeclared."""
        action = str(action)
        if action in self.new_actions:
            return ActionCategory.NEW
        if action in self.member_actions:
            return ActionCategory.MEMBER
        if action in self.collection_actions:
            return ActionCategory.COLLECTION
        return None

    def copy(self) -> ResourceProperties:
        return ResourceProperties(
            model_name=self.model_name,
            associations=list(self.associations),
            new_actions=list(self.new_actions),
            member_actions=list(self.member_actions),
            collection_actions=list(self.collection_actions),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert properties to dictionary."""
        return {
            "model_name": self.model_name,
            "associations": [
                (model_name_of(model) if isinstance(model, type) else model, alias)
                for model, alias in self.associations
            ],
            "new_actions": list(self.new_actions),
            "member_actions": list(self.member_actions),
            "collection_actions": list(self.collection_actions),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResourceProperties:
        """Create properties from dictionary."""
        return cls(
            model_name=data.get("model_name"),
            associations=[tuple(entry) for entry in data.get("associations", [])],
            new_actions=data.get("new_actions", list(DEFAULT_NEW_ACTIONS)),
            member_actions=data.get("member_actions", list(DEFAULT_MEMBER_ACTIONS)),
            collection_actions=data.get(
                "collection_actions", list(DEFAULT_COLLECTION_ACTIONS)
            ),
        )
