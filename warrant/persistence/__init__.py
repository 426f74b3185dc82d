"""
Persistence adapters for Warrant.

The resource resolvers consume storage through the ``ModelAdapter``
protocol. Available adapters:

- InMemoryAdapter: Built-in dictionary-backed adapter (no dependencies)
- SQLAlchemyAdapter: ORM session adapter (requires sqlalchemy package)

Quick Start:
    >>> from warrant.persistence import AdapterFactory
    >>>
    >>> adapter = AdapterFactory.create("memory", models=[Client, Account])
    >>>
    >>> # Or with SQLAlchemy
    >>> adapter = AdapterFactory.create("sqlalchemy", session=session, base=Base)
"""

from __future__ import annotations

from typing import Any

from warrant.exceptions import AdapterNotAvailableError
from warrant.persistence.base import BaseModelAdapter, ModelAdapter
from warrant.persistence.memory import (
    Collection,
    HasMany,
    InMemoryAdapter,
    Model,
    has_many,
)


class AdapterFactory:
    """
    Factory for creating persistence adapters by name.

    Available Adapter Types:
        - "memory": InMemoryAdapter (always available)
        - "sqlalchemy": SQLAlchemyAdapter (requires sqlalchemy package)
    """

    @classmethod
    def create(cls, adapter_type: str = "memory", **options: Any) -> BaseModelAdapter:
        """
        Create a persistence adapter.

        Args:
            adapter_type: "memory" or "sqlalchemy".
            **options: Adapter-specific options. "memory" accepts
                ``models``; "sqlalchemy" accepts ``session`` and ``base``.

        Raises:
            AdapterNotAvailableError: If the adapter type is unknown or its
                library is not installed.
        """
        adapter_type = adapter_type.lower()

        if adapter_type == "memory":
            return InMemoryAdapter(*options.get("models", ()))

        if adapter_type == "sqlalchemy":
            # Lazy import due to optional dependency
            from warrant.persistence.sqlalchemy_adapter import SQLAlchemyAdapter
            return SQLAlchemyAdapter(options["session"], base=options.get("base"))

        raise AdapterNotAvailableError(
            adapter_type,
            f"one of: {', '.join(cls.get_available_adapters())}",
        )

    @classmethod
    def get_available_adapters(cls) -> list[str]:
        """List adapter types whose dependencies are installed."""
        from warrant.persistence.sqlalchemy_adapter import HAS_SQLALCHEMY

        available = ["memory"]
        if HAS_SQLALCHEMY:
            available.append("sqlalchemy")
        return available


__all__ = [
    "AdapterFactory",
    "BaseModelAdapter",
    "ModelAdapter",
    "InMemoryAdapter",
    "Model",
    "Collection",
    "HasMany",
    "has_many",
]
