"""
Resource information for Warrant.

Resolves which model, record and parameters a request is about:

- ``PrimaryResourceInfo`` resolves the action's main resource from the
  declared resource path and the submitted parameters, including the
  most specific subclass the parameters reveal.
- ``ParentResourceInfo`` resolves the optional parent record from the
  declared parent candidates and the request's path parameters.

Examples for a handler serving ``accounts`` (simple case):
    info.klass        => Account
    info.params       => params["account"]
    info.name         => "account"
    info.plural_name  => "accounts"

For a handler serving ``lottery/assignments`` (namespaced):
    info.klass        => Lottery.Assignment
    info.params       => params["lottery_assignment"]
    info.name         => "assignment"
    info.plural_name  => "lottery_assignments"

For a handler serving ``accounts`` receiving a ``secret_account`` payload:
    info.klass        => Account
    info.real_class   => SecretAccount
    info.params       => params["secret_account"]
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from warrant.inflector import (
    association_accessor,
    demodulized_var_name,
    is_namespaced,
    model_name,
    plural_name,
    singular_name,
    underscore_path,
    var_name,
)

if TYPE_CHECKING:
    from warrant.persistence.base import ModelAdapter

logger = logging.getLogger(__name__)


class ResourceInfo:
    """
    Base class for resolved resource information.

    Attributes:
        klass: The resolved model class, or None.
        real_class: The most specific class actually in play.
        name: Binding name (attribute name on the request handler).
        params: Parameters submitted for this resource, or None.
    """

    klass: type | None = None
    name: str | None = None

    def __init__(self, adapter: ModelAdapter) -> None:
        self.adapter = adapter
        self._data: Any = None

    @property
    def params(self) -> Any:
        return self._data

    @property
    def real_class(self) -> type | None:
        return self.klass

    @staticmethod
    def _extract(params: Mapping[str, Any] | None, key: str) -> Any:
        if not params:
            return None
        return params.get(key)


class PrimaryResourceInfo(ResourceInfo):
    """
    The resource an action targets.

    Args:
        resource_path: Declared resource path (``"accounts"``,
            ``"lottery/assignments"``) or a model class.
        params: Raw request parameters.
        adapter: Persistence adapter used to classify models and build
            relations.
    """

    def __init__(
        self,
        resource_path: Any,
        params: Mapping[str, Any] | None,
        adapter: ModelAdapter,
    ) -> None:
        super().__init__(adapter)
        if isinstance(resource_path, type):
            resource_path = underscore_path(model_name(resource_path))
        self.path = str(resource_path)
        self.klass = adapter.classify(self.path)
        self.name = singular_name(self.path)
        self.plural_name = plural_name(self.path)

        self._real_class = self.klass
        for candidate in [self.klass, *adapter.subclasses_of(self.klass)]:
            if params and var_name(candidate) in params:
                self._real_class = candidate
                break
        self._data = self._extract(params, var_name(self._real_class))

        logger.debug(
            f"Resolved resource '{self.path}' to {self.klass.__name__} "
            f"(real class {self._real_class.__name__})"
        )

    @property
    def real_class(self) -> type:
        return self._real_class

    def relation(self, parent_info: ParentResourceInfo | None = None) -> Any:
        """
        The relation used to find or build records of this resource.

        With a loaded parent, the parent's association named by the
        declared alias (or by ``plural_name``) is used when it exists;
        otherwise the conventional accessor named after the demodulized,
        pluralized model (``Lottery::Prize`` -> ``prizes``). Without a
        parent the relation is the real class itself.
        """
        if parent_info is None or parent_info.object is None:
            return self.real_class

        name = parent_info.as_ or self.plural_name
        if self.adapter.association_named(parent_info.klass, name) is not None:
            return self.adapter.collection_for(parent_info.object, name)

        accessor = association_accessor(self.klass)
        if parent_info.as_:
            logger.warning(
                f"{parent_info.klass.__name__} has no association '{name}'; "
                f"falling back to accessor '{accessor}'"
            )
        else:
            logger.debug(
                f"{parent_info.klass.__name__} has no association '{name}', "
                f"using accessor '{accessor}'"
            )
        return self.adapter.collection_for(parent_info.object, accessor)

    def __repr__(self) -> str:
        return (
            f"<PrimaryResourceInfo path={self.path!r} klass={self.klass.__name__} "
            f"real_class={self.real_class.__name__}>"
        )


class ParentResourceInfo(ResourceInfo):
    """
    The parent record an action is nested under, if any.

    Candidates are tried in declaration order. For each candidate, the
    candidate class and then its subclasses are probed for
    ``"<name>_id"`` in the path parameters, first with the full
    namespace-flattened name and then, for namespaced models, with the
    demodulized name. The first hit wins and the record is loaded.

    When nothing matches, ``klass``, ``name``, ``id`` and ``object`` are
    all None and the info is falsy.

    Raises:
        RecordNotFound: From the adapter, when the matched id does not
            exist. It is not caught here.
    """

    def __init__(
        self,
        associations: Sequence[tuple[Any, str | None]],
        params: Mapping[str, Any] | None,
        path_params: Mapping[str, Any] | None,
        adapter: ModelAdapter,
    ) -> None:
        super().__init__(adapter)
        self.id: Any = None
        self.as_: str | None = None
        self.object: Any = None
        path_params = path_params or {}

        matched: type | None = None
        for model, alias in associations:
            klass = adapter.classify(model)
            for candidate in [klass, *adapter.subclasses_of(klass)]:
                name, record_id = self._probe(candidate, path_params)
                if record_id is not None:
                    self.klass, self.as_, self.name, self.id = klass, alias, name, record_id
                    matched = candidate
                    break
            if matched is not None:
                break

        if matched is None:
            logger.debug("No parent found in path parameters")
            return

        logger.debug(f"Loading parent {matched.__name__} id={self.id!r}")
        self.object = adapter.find(matched, self.id)
        self._data = self._extract(params, var_name(matched))

    @staticmethod
    def _probe(candidate: type, path_params: Mapping[str, Any]) -> tuple[str, Any]:
        name = var_name(candidate)
        record_id = path_params.get(f"{name}_id")
        if record_id is None and is_namespaced(candidate):
            name = demodulized_var_name(candidate)
            record_id = path_params.get(f"{name}_id")
        return name, record_id

    @property
    def has_object(self) -> bool:
        return self.object is not None

    def __bool__(self) -> bool:
        return self.object is not None

    @property
    def real_class(self) -> type | None:
        return type(self.object) if self.object is not None else None

    def __repr__(self) -> str:
        if self.object is None:
            return "<ParentResourceInfo none>"
        return f"<ParentResourceInfo {self.name}={self.object!r}>"
