"""
In-memory persistence adapter for Warrant.

A dependency-free adapter that keeps records in dictionaries. It is used
by the test suite and is handy for prototyping. Subclass records are
stored with their root model (single-table style), so looking up an
``Account`` by id can return a ``SecretAccount``.

Example:
    >>> class Client(Model):
    ...     __associations__ = {"accounts": has_many("Account", "client_id")}
    >>> class Account(Model):
    ...     pass
    >>>
    >>> adapter = InMemoryAdapter(Client, Account)
    >>> client = adapter.save(Client(name="Acme"))
    >>> account = adapter.new(adapter.collection_for(client, "accounts"), {"name": "Main"})
    >>> account.client_id == client.id
    True
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from warrant.exceptions import RecordNotFound
from warrant.persistence.base import BaseModelAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HasMany:
    """
    A one-to-many association declared on an in-memory model.

    Attributes:
        model: The associated model class or its model name.
        foreign_key: Attribute on the associated records that holds the
            owner's id.
    """
    model: type | str
    foreign_key: str


def has_many(model: type | str, foreign_key: str) -> HasMany:
    return HasMany(model=model, foreign_key=foreign_key)


class Model:
    """
    Base class for in-memory records.

    Keyword arguments become attributes. ``id`` is None until the record
    is saved through an adapter.
    """

    __associations__: ClassVar[dict[str, HasMany]] = {}

    def __init__(self, **attributes: Any) -> None:
        self.id = attributes.pop("id", None)
        for key, value in attributes.items():
            setattr(self, key, value)

    @property
    def new_record(self) -> bool:
        return self.id is None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r}>"


def _same_id(left: Any, right: Any) -> bool:
    # Path parameters arrive as strings
    return left is not None and str(left) == str(right)


class Collection:
    """
    Records of one model belonging to an owner record.

    Returned by ``InMemoryAdapter.collection_for`` and usable as a
    relation for ``find`` and ``new``.
    """

    def __init__(
        self,
        adapter: InMemoryAdapter,
        owner: Model,
        name: str,
        association: HasMany,
    ) -> None:
        self.adapter = adapter
        self.owner = owner
        self.name = name
        self.association = association

    @property
    def model(self) -> type:
        return self.adapter.classify(self.association.model)

    def all(self) -> list[Any]:
        key = self.association.foreign_key
        return [
            record for record in self.adapter.all(self.model)
            if _same_id(getattr(record, key, None), self.owner.id)
        ]

    def find(self, record_id: Any) -> Any:
        for record in self.all():
            if _same_id(record.id, record_id):
                return record
        raise RecordNotFound(self, record_id)

    def new(self, attributes: Mapping[str, Any] | None = None) -> Any:
        values = dict(attributes or {})
        values[self.association.foreign_key] = self.owner.id
        return self.model(**values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self.all())

    def __repr__(self) -> str:
        return f"{type(self.owner).__name__}#{self.owner.id}.{self.name}"


class InMemoryAdapter(BaseModelAdapter):
    """
    Persistence adapter backed by plain dictionaries.

    Records are grouped by root model: the topmost ``Model`` subclass in a
    record's ancestry. Ids are assigned per root model on ``save``.
    """

    name = "memory"

    def __init__(self, *models: type) -> None:
        super().__init__()
        self._tables: dict[type, dict[Any, Model]] = {}
        self._sequences: dict[type, Iterator[int]] = {}
        self.register_model(*models)

    @staticmethod
    def _root(klass: type) -> type:
        root = klass
        for ancestor in klass.__mro__:
            if ancestor is Model:
                break
            if issubclass(ancestor, Model):
                root = ancestor
        return root

    def save(self, record: Model) -> Model:
        """Store a record, assigning an id when it has none."""
        root = self._root(type(record))
        with self._lock:
            table = self._tables.setdefault(root, {})
            if record.id is None:
                sequence = self._sequences.setdefault(root, itertools.count(1))
                record.id = next(sequence)
            table[record.id] = record
        logger.debug(f"Saved {record!r}")
        return record

    def all(self, klass: type) -> list[Any]:
        with self._lock:
            table = self._tables.get(self._root(klass), {})
            return [record for record in table.values() if isinstance(record, klass)]

    def find(self, relation: Any, record_id: Any) -> Any:
        if isinstance(relation, type):
            records = self.all(relation)
        elif hasattr(relation, "find"):
            return relation.find(record_id)
        else:
            # Plain accessor results, e.g. a list returned by a model method
            records = list(relation)
        for record in records:
            if _same_id(record.id, record_id):
                return record
        raise RecordNotFound(relation, record_id)

    def new(self, relation: Any, attributes: Mapping[str, Any] | None) -> Any:
        if not isinstance(relation, type):
            return relation.new(attributes)
        return relation(**dict(attributes or {}))

    def association_named(self, klass: type, name: str) -> HasMany | None:
        for ancestor in klass.__mro__:
            association = ancestor.__dict__.get("__associations__", {}).get(name)
            if association is not None:
                return association
        return None

    def collection_for(self, instance: Any, name: str) -> Any:
        association = self.association_named(type(instance), name)
        if association is None:
            return self._accessor(instance, name)
        return Collection(self, instance, name, association)
