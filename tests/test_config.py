"""
Tests for configuration, the Warrant entry point and the error types.
"""

from __future__ import annotations

import logging

import pytest

from tests.conftest import AccountPolicy, User
from tests.models import Account, Archive, Client, SecretAccount
from warrant import (
    AccessDenied,
    AllowAllPolicy,
    ConfigurationError,
    DenyAllPolicy,
    Policy,
    RecordNotFound,
    Warrant,
    WarrantConfig,
    WarrantError,
)
from warrant.persistence import InMemoryAdapter, Model
from warrant.policies import PolicyRegistry


class TestWarrantConfig:
    """Tests for WarrantConfig."""

    def test_defaults(self):
        config = WarrantConfig()

        assert config.default_policy is None
        assert config.persistence_base is object
        assert config.adapter == "memory"
        assert config.adapter_options == {}
        assert config.log_level is None

    def test_log_level_name(self):
        assert WarrantConfig(log_level="debug").log_level == logging.DEBUG

    def test_invalid_log_level(self):
        with pytest.raises(ConfigurationError) as exc_info:
            WarrantConfig(log_level="chatty")

        assert exc_info.value.config_key == "log_level"

    def test_invalid_default_policy(self):
        with pytest.raises(ConfigurationError) as exc_info:
            WarrantConfig(default_policy=Account)

        assert exc_info.value.config_key == "default_policy"

    def test_invalid_persistence_base(self):
        with pytest.raises(ConfigurationError):
            WarrantConfig(persistence_base="Model")

    def test_apply_logging(self):
        logger = logging.getLogger("warrant")
        previous = logger.level
        try:
            WarrantConfig(log_level=logging.WARNING).apply_logging()
            assert logger.level == logging.WARNING
        finally:
            logger.setLevel(previous)

    def test_to_dict(self):
        config = WarrantConfig(default_policy=AllowAllPolicy, persistence_base=Model)

        assert config.to_dict() == {
            "default_policy": "warrant.policies.builtin:AllowAllPolicy",
            "persistence_base": "warrant.persistence.memory:Model",
            "adapter": "memory",
            "adapter_options": {},
            "log_level": None,
        }

    def test_from_dict(self):
        config = WarrantConfig.from_dict(
            {"persistence_base": Model, "adapter_options": {"models": [Client]}}
        )

        assert config.persistence_base is Model
        assert config.adapter_options == {"models": [Client]}

    def test_dict_round_trip(self):
        config = WarrantConfig(
            default_policy=AccountPolicy, persistence_base=Model, log_level="info"
        )
        restored = WarrantConfig.from_dict(config.to_dict())

        assert restored.default_policy is AccountPolicy
        assert restored.persistence_base is Model
        assert restored.log_level == logging.INFO

    def test_default_round_trip(self):
        restored = WarrantConfig.from_dict(WarrantConfig().to_dict())

        assert restored.default_policy is None
        assert restored.persistence_base is object

    def test_unresolvable_class_path(self):
        with pytest.raises(ConfigurationError) as exc_info:
            WarrantConfig.from_dict({"persistence_base": "Model"})

        assert exc_info.value.config_key == "persistence_base"


class TestWarrant:
    """Tests for the Warrant entry point."""

    def test_adapter_from_config(self):
        warrant = Warrant(config=WarrantConfig(adapter_options={"models": [Client]}))

        assert isinstance(warrant.adapter, InMemoryAdapter)
        assert warrant.adapter.classify("clients") is Client

    def test_registry_from_config(self):
        warrant = Warrant(
            adapter=InMemoryAdapter(),
            config=WarrantConfig(default_policy=AllowAllPolicy, persistence_base=Model),
        )

        assert warrant.registry.default_policy is AllowAllPolicy
        assert warrant.registry.persistence_base is Model
        assert warrant.authorization.registry is warrant.registry

    def test_explicit_registry(self, policy_registry: PolicyRegistry):
        warrant = Warrant(adapter=InMemoryAdapter(), registry=policy_registry)
        assert warrant.registry is policy_registry

    def test_policy_decorator(self, warrant: Warrant):
        @warrant.policy(Archive)
        class ArchivePolicy(Policy):
            def can_index(self) -> bool:
                return True

        assert warrant.resolve_policy(Archive) is ArchivePolicy
        assert warrant.authorized("index", Archive) is True

    def test_resolve_policy(self, warrant: Warrant):
        assert warrant.resolve_policy(SecretAccount) is AccountPolicy
        assert warrant.resolve_policy(Archive) is DenyAllPolicy

    def test_actor_context(self, warrant: Warrant, admin_user: User):
        assert warrant.actor is None

        with warrant.actor_context(admin_user):
            assert warrant.actor is admin_user
            assert warrant.authorized("destroy", Account) is True

        assert warrant.actor is None

    def test_set_actor(self, warrant: Warrant, basic_user: User):
        warrant.set_actor(basic_user)

        assert warrant.authorized("index", Account) is True
        assert warrant.check("destroy", Account).allowed is False

    def test_authorize(self, warrant: Warrant, basic_user: User, account: Account):
        warrant.set_actor(basic_user)

        assert warrant.authorize("show", account).allowed is True
        with pytest.raises(AccessDenied):
            warrant.authorize("update", account, message="Read only")

    def test_explicit_actor(self, warrant: Warrant, admin_user: User):
        assert warrant.authorized("create", Account, actor=admin_user) is True
        assert warrant.authorized("create", Account) is False


class TestErrors:
    """Tests for the error hierarchy."""

    def test_hierarchy(self):
        for error_class in (AccessDenied, RecordNotFound, ConfigurationError):
            assert issubclass(error_class, WarrantError)

    def test_warrant_error_str(self):
        assert str(WarrantError("plain")) == "plain"
        assert str(WarrantError("with", {"key": 1})) == "with | Details: {'key': 1}"

    def test_record_not_found(self):
        error = RecordNotFound(Account, "12")

        assert error.message == "Couldn't find Account with id='12'"
        assert error.to_dict()["details"] == {"model": "Account", "record_id": "12"}

    def test_configuration_error_message(self):
        error = ConfigurationError("model_name", "a known model", "tickets")

        assert error.message == (
            "Configuration error for 'model_name': expected a known model, got 'tickets'"
        )

    def test_access_denied_describes_unsaved_record(self):
        error = AccessDenied(action="create", subject=Account(name="X"))
        assert error.details["subject"] == "Account"
