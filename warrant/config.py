"""
Configuration for Warrant.

Classes held by the configuration are serialized as import paths of the
form ``"package.module:Qualified.Name"`` and resolved again on load.
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from warrant.exceptions import ConfigurationError

if TYPE_CHECKING:
    from warrant.policies.base import Policy


def class_path(klass: type) -> str:
    """Import path of ``klass``, e.g. ``"warrant.persistence.memory:Model"``."""
    return f"{klass.__module__}:{klass.__qualname__}"


def resolve_class(value: Any, config_key: str) -> Any:
    """Resolve an import path produced by ``class_path``; other values pass through."""
    if not isinstance(value, str):
        return value

    module_name, _, qualname = value.partition(":")
    try:
        target: Any = importlib.import_module(module_name)
        for attribute in qualname.split("."):
            target = getattr(target, attribute)
    except (ImportError, AttributeError, ValueError) as e:
        raise ConfigurationError(
            config_key=config_key,
            expected="an importable 'module:Class' path",
            received=value,
        ) from e
    return target


@dataclass
class WarrantConfig:
    """
    Configuration for a ``Warrant`` instance.

    Attributes:
        default_policy: Policy used when no policy matches a class.
            None means DenyAllPolicy.
        persistence_base: Root of the model hierarchy; it and its
            ancestors are never considered for policy resolution.
        adapter: Persistence adapter type used when no adapter instance
            is given ("memory" or "sqlalchemy").
        adapter_options: Keyword options for the adapter factory.
        log_level: Optional level for the "warrant" logger.
    """

    default_policy: type[Policy] | None = None
    persistence_base: type = object
    adapter: str = "memory"
    adapter_options: dict[str, Any] = field(default_factory=dict)
    log_level: int | str | None = None

    def __post_init__(self) -> None:
        from warrant.policies.base import Policy

        if not isinstance(self.persistence_base, type):
            raise ConfigurationError(
                config_key="persistence_base",
                expected="a class",
                received=self.persistence_base,
            )
        if self.default_policy is not None and not (
            isinstance(self.default_policy, type) and issubclass(self.default_policy, Policy)
        ):
            raise ConfigurationError(
                config_key="default_policy",
                expected="a Policy subclass",
                received=self.default_policy,
            )
        if isinstance(self.log_level, str):
            level = logging.getLevelName(self.log_level.upper())
            if not isinstance(level, int):
                raise ConfigurationError(
                    config_key="log_level",
                    expected="a logging level name such as 'DEBUG'",
                    received=self.log_level,
                )
            self.log_level = level

    def apply_logging(self) -> None:
        """Set the level of the library's root logger, if configured."""
        if self.log_level is not None:
            logging.getLogger("warrant").setLevel(self.log_level)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "default_policy": class_path(self.default_policy) if self.default_policy else None,
            "persistence_base": class_path(self.persistence_base),
            "adapter": self.adapter,
            "adapter_options": dict(self.adapter_options),
            "log_level": self.log_level,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WarrantConfig:
        """Create config from dictionary."""
        return cls(
            default_policy=resolve_class(data.get("default_policy"), "default_policy"),
            persistence_base=resolve_class(data.get("persistence_base", object), "persistence_base"),
            adapter=data.get("adapter", "memory"),
            adapter_options=dict(data.get("adapter_options", {})),
            log_level=data.get("log_level"),
        )
