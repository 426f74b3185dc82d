"""
SQLAlchemy persistence adapter for Warrant.

Maps the adapter protocol onto a SQLAlchemy ORM session: models are
discovered from the declarative registry, records are loaded with
``Session.get`` and associations are probed through mapper
relationships.

SQLAlchemy is an optional dependency. If not installed, attempting to
use this adapter will raise an informative error.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from warrant.exceptions import AdapterNotAvailableError, RecordNotFound
from warrant.persistence.base import BaseModelAdapter

logger = logging.getLogger(__name__)

# Check if sqlalchemy is available
try:
    from sqlalchemy import inspect as sa_inspect
    HAS_SQLALCHEMY = True
except ImportError:
    sa_inspect = None  # type: ignore
    HAS_SQLALCHEMY = False


def _coerce_id(mapper: Any, record_id: Any) -> Any:
    """Convert a path parameter to the type of the mapper's primary key."""
    column = mapper.primary_key[0]
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return record_id
    if isinstance(record_id, python_type):
        return record_id
    try:
        return python_type(record_id)
    except (TypeError, ValueError):
        return record_id


class AssociationScope:
    """
    Records reached from an owner through a relationship.

    ``new`` builds a record and appends it to the owner's collection, so
    the foreign key is filled in when the session flushes.
    """

    def __init__(self, owner: Any, name: str, relationship: Any) -> None:
        self.owner = owner
        self.name = name
        self.relationship = relationship

    @property
    def model(self) -> type:
        return self.relationship.mapper.class_

    def all(self) -> list[Any]:
        return list(getattr(self.owner, self.name))

    def find(self, record_id: Any) -> Any:
        mapper = self.relationship.mapper
        wanted = _coerce_id(mapper, record_id)
        for record in self.all():
            if mapper.primary_key_from_instance(record)[0] == wanted:
                return record
        raise RecordNotFound(self, record_id)

    def new(self, attributes: Mapping[str, Any] | None = None) -> Any:
        record = self.model(**dict(attributes or {}))
        getattr(self.owner, self.name).append(record)
        return record

    def __iter__(self) -> Iterator[Any]:
        return iter(self.all())

    def __repr__(self) -> str:
        return f"{type(self.owner).__name__}.{self.name}"


class SQLAlchemyAdapter(BaseModelAdapter):
    """
    Persistence adapter backed by a SQLAlchemy ORM session.

    Requirements:
        Install with: pip install warrant[sqlalchemy]

    Example:
        >>> adapter = SQLAlchemyAdapter(session, base=Base)
        >>> adapter.classify("accounts")
        <class 'Account'>
        >>> adapter.find(Account, "7")
        <Account 7>
    """

    name = "sqlalchemy"

    def __init__(self, session: Any, base: type | None = None) -> None:
        """
        Initialize the adapter.

        Args:
            session: The ORM session used for lookups.
            base: Declarative base whose registry lists the mapped models.

        Raises:
            AdapterNotAvailableError: If sqlalchemy is not installed.
        """
        if not HAS_SQLALCHEMY:
            raise AdapterNotAvailableError(
                self.name,
                "sqlalchemy to be installed: pip install warrant[sqlalchemy]",
            )
        super().__init__()
        self.session = session
        self.base = base

    def _discover_models(self) -> Iterable[type]:
        if self.base is None:
            return ()
        return [mapper.class_ for mapper in self.base.registry.mappers]

    def _mapper(self, klass: type) -> Any:
        return sa_inspect(klass, raiseerr=False)

    def find(self, relation: Any, record_id: Any) -> Any:
        if not isinstance(relation, type):
            return relation.find(record_id)
        record = self.session.get(relation, _coerce_id(self._mapper(relation), record_id))
        if record is None or not isinstance(record, relation):
            raise RecordNotFound(relation, record_id)
        return record

    def new(self, relation: Any, attributes: Mapping[str, Any] | None) -> Any:
        if not isinstance(relation, type):
            return relation.new(attributes)
        return relation(**dict(attributes or {}))

    def association_named(self, klass: type, name: str) -> Any | None:
        mapper = self._mapper(klass)
        if mapper is None or name not in mapper.relationships:
            return None
        return mapper.relationships[name]

    def collection_for(self, instance: Any, name: str) -> Any:
        relationship = self.association_named(type(instance), name)
        if relationship is None:
            return self._accessor(instance, name)
        return AssociationScope(instance, name, relationship)
