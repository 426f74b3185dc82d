"""
Persistence adapter protocol and base class for Warrant.

The resource resolvers never talk to a storage engine directly. They use
a ``ModelAdapter``: a small capability surface for classifying
identifiers into model classes, walking subclasses, loading and building
records, and probing associations. Adapters for concrete storage engines
implement this protocol.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from warrant.exceptions import ConfigurationError
from warrant.inflector import classify_name, model_name

logger = logging.getLogger(__name__)


@runtime_checkable
class ModelAdapter(Protocol):
    """
    Protocol defining the persistence capabilities Warrant consumes.

    A *relation* is either a model class or a scope returned by
    ``collection_for`` (for example a parent's association collection);
    ``find`` and ``new`` accept both.
    """

    def classify(self, identifier: Any) -> type:
        """Resolve a class or identifier such as ``"lottery/packages"`` to a model class."""
        ...

    def subclasses_of(self, klass: type) -> list[type]:
        """All known subclasses of ``klass``, most general first."""
        ...

    def find(self, relation: Any, record_id: Any) -> Any:
        """Load a record by id; raises ``RecordNotFound`` when absent."""
        ...

    def new(self, relation: Any, attributes: Mapping[str, Any] | None) -> Any:
        """Build an unsaved record within ``relation``."""
        ...

    def association_named(self, klass: type, name: str) -> Any | None:
        """The association ``name`` declared on ``klass``, or None."""
        ...

    def collection_for(self, instance: Any, name: str) -> Any:
        """The relation reached from ``instance`` through ``name``."""
        ...


class BaseModelAdapter(ABC):
    """
    Base class for persistence adapters.

    Provides the model catalog used by ``classify`` and the subclass walk
    shared by all adapters. Subclasses implement record loading, building
    and association probing.

    Models can be registered explicitly with ``register_model``; adapters
    that can enumerate mapped classes on their own override
    ``_discover_models``. Subclasses of known models are always known.
    """

    name: str = "base"

    def __init__(self) -> None:
        self._catalog: dict[str, type] = {}
        self._lock = threading.RLock()

    def register_model(self, *models: type) -> None:
        """Make models available to ``classify``."""
        with self._lock:
            for model in models:
                self._catalog[model_name(model)] = model
                logger.debug(f"Registered model '{model_name(model)}' with {self.name} adapter")

    def _discover_models(self) -> Iterable[type]:
        return ()

    def known_models(self) -> dict[str, type]:
        """All models reachable from the catalog, keyed by model name."""
        with self._lock:
            roots = list(self._catalog.values())
        roots.extend(self._discover_models())

        known: dict[str, type] = {}
        for root in roots:
            for klass in [root, *self.subclasses_of(root)]:
                known.setdefault(model_name(klass), klass)
        return known

    def classify(self, identifier: Any) -> type:
        """
        Resolve ``identifier`` to a model class.

        Classes pass through unchanged. Strings are singularized and
        camelized (``"lottery/packages"`` -> ``"Lottery::Package"``) and
        looked up among the known models.

        Raises:
            ConfigurationError: If no known model has that name.
        """
        if isinstance(identifier, type):
            return identifier

        name = classify_name(identifier)
        with self._lock:
            klass = self._catalog.get(name)
        if klass is None:
            klass = self.known_models().get(name)
        if klass is None:
            raise ConfigurationError(
                config_key="model_name",
                expected="the name of a known model",
                received=identifier,
            )
        return klass

    def subclasses_of(self, klass: type) -> list[type]:
        """
        All subclasses of ``klass``, breadth first.

        Direct subclasses come before their own subclasses, so more
        general types are always tried first.
        """
        found: list[type] = []
        queue = list(klass.__subclasses__())
        while queue:
            subclass = queue.pop(0)
            if subclass in found:
                continue
            found.append(subclass)
            queue.extend(subclass.__subclasses__())
        return found

    @abstractmethod
    def find(self, relation: Any, record_id: Any) -> Any:
        """Load a record by id; raises ``RecordNotFound`` when absent."""
        pass

    @abstractmethod
    def new(self, relation: Any, attributes: Mapping[str, Any] | None) -> Any:
        """Build an unsaved record within ``relation``."""
        pass

    @abstractmethod
    def association_named(self, klass: type, name: str) -> Any | None:
        """The association ``name`` declared on ``klass``, or None."""
        pass

    @abstractmethod
    def collection_for(self, instance: Any, name: str) -> Any:
        """The relation reached from ``instance`` through ``name``."""
        pass

    def _accessor(self, instance: Any, name: str) -> Any:
        """
        Conventional accessor fallback for undeclared associations.

        Raises:
            ConfigurationError: If ``instance`` has no attribute ``name``.
        """
        accessor = getattr(instance, name, None)
        if accessor is None:
            raise ConfigurationError(
                config_key="association",
                expected=f"an association or accessor named '{name}' on "
                         f"{type(instance).__name__}",
                received=name,
            )
        if callable(accessor) and not isinstance(accessor, type):
            return accessor()
        return accessor

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
