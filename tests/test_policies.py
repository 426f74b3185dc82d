"""
Tests for the policy system.

Tests cover:
- Policy base class and action dispatch
- Built-in policies (DenyAllPolicy, AllowAllPolicy)
- Policy registry registration
- Ancestry-based resolution and the persistence base boundary
"""

from __future__ import annotations

import logging

import pytest

from tests.conftest import AccountPolicy, User
from tests.models import Account, Client, Lottery, SecretAccount
from warrant.persistence import Model
from warrant.policies import (
    AllowAllPolicy,
    DenyAllPolicy,
    Policy,
    PolicyRegistry,
    get_global_registry,
    reset_global_registry,
)


class TestPolicyBaseClass:
    """Tests for the Policy base class."""

    def test_policy_initialization(self, basic_user: User, account: Account, client: Client):
        """Test Policy stores its construction arguments."""
        policy = Policy(basic_user, "show", Account, account, client)

        assert policy.actor == basic_user
        assert policy.action == "show"
        assert policy.klass is Account
        assert policy.instance is account
        assert policy.parent is client

    def test_action_is_normalized_to_string(self, basic_user: User):
        """Test non-string action tokens are converted."""
        class Action:
            def __str__(self) -> str:
                return "show"

        policy = Policy(basic_user, Action(), Account)
        assert policy.action == "show"

    def test_subject_prefers_instance(self, basic_user: User, account: Account):
        """Test subject is the instance when present, else the class."""
        assert Policy(basic_user, "show", Account, account).subject is account
        assert Policy(basic_user, "index", Account).subject is Account

    def test_policy_default_denies_all(self, basic_user: User):
        """Test that the base Policy denies actions it has no method for."""
        for action in ("index", "show", "create", "destroy"):
            assert Policy(basic_user, action, Account).authorized() is False

    def test_dispatches_to_can_method(self, admin_user: User, basic_user: User):
        """Test authorized() calls the matching can_<action> method."""
        assert AccountPolicy(admin_user, "create", Account).authorized() is True
        assert AccountPolicy(basic_user, "create", Account).authorized() is False
        assert AccountPolicy(basic_user, "index", Account).authorized() is True

    def test_truthy_results_become_bool(self, basic_user: User):
        """Test decision methods returning non-bool values are coerced."""
        class LoosePolicy(Policy):
            def can_show(self):
                return self.actor.roles

        assert LoosePolicy(basic_user, "show", Account).authorized() is True

    def test_get_available_actions(self):
        """Test scanning for can_ methods."""
        assert AccountPolicy.get_available_actions() == [
            "create", "destroy", "index", "new", "show", "update",
        ]


class TestBuiltinPolicies:
    """Tests for DenyAllPolicy and AllowAllPolicy."""

    def test_deny_all_denies_everything(self, admin_user: User):
        """Test DenyAllPolicy denies even admins and unknown actions."""
        for action in ("index", "show", "anything"):
            assert DenyAllPolicy(admin_user, action, Account).authorized() is False

    def test_allow_all_allows_everything(self, basic_user: User):
        """Test AllowAllPolicy allows any action."""
        for action in ("index", "destroy", "anything"):
            assert AllowAllPolicy(basic_user, action, Account).authorized() is True

    def test_allow_all_logs_warning(self, basic_user: User, caplog: pytest.LogCaptureFixture):
        """Test AllowAllPolicy warns when instantiated."""
        with caplog.at_level(logging.WARNING, logger="warrant.policies.builtin"):
            AllowAllPolicy(basic_user, "show", Account)
        assert "should NOT be used in production" in caplog.text


class TestPolicyRegistry:
    """Tests for registering policies."""

    def test_register_policy(self, policy_registry: PolicyRegistry):
        """Test registering a policy class for a model class."""
        policy_registry.register(Account, AccountPolicy)
        assert policy_registry.resolve(Account) is AccountPolicy
        assert policy_registry.has_policy(Account) is True

    def test_register_policy_decorator(self, policy_registry: PolicyRegistry):
        """Test registering policy via decorator."""
        @policy_registry.policy(Client)
        class DecoratedPolicy(Policy):
            pass

        assert policy_registry.resolve(Client) is DecoratedPolicy

    def test_register_by_model_name(self, policy_registry: PolicyRegistry):
        """Test registering a policy under a namespaced model name."""
        @policy_registry.policy("Lottery::Package")
        class PackagePolicy(Policy):
            pass

        assert policy_registry.resolve(Lottery.Package) is PackagePolicy
        assert policy_registry.has_policy("Lottery.Package") is True

    def test_policy_overwrite_warns(
        self, policy_registry: PolicyRegistry, caplog: pytest.LogCaptureFixture
    ):
        """Test that registering the same model twice replaces the policy."""
        class PolicyV1(Policy):
            pass

        class PolicyV2(Policy):
            pass

        policy_registry.register(Account, PolicyV1)
        with caplog.at_level(logging.WARNING, logger="warrant.policies.registry"):
            policy_registry.register(Account, PolicyV2)

        assert policy_registry.resolve(Account) is PolicyV2
        assert "Overwriting policy" in caplog.text

    def test_list_policies(self, policy_registry: PolicyRegistry):
        """Test listing all registered policies by model name."""
        policy_registry.register(Account, AccountPolicy)
        policy_registry.register("Lottery::Prize", DenyAllPolicy)

        assert policy_registry.list_policies() == {
            "Account": "AccountPolicy",
            "Lottery::Prize": "DenyAllPolicy",
        }

    def test_unregister_policy(self, policy_registry: PolicyRegistry):
        """Test unregistering a policy."""
        policy_registry.register(Account, AccountPolicy)

        assert policy_registry.unregister(Account) is True
        assert policy_registry.unregister(Account) is False
        assert policy_registry.resolve(Account) is DenyAllPolicy

    def test_clear(self, policy_registry: PolicyRegistry):
        """Test clearing all policies."""
        policy_registry.register(Account, AccountPolicy)
        policy_registry.clear()
        assert policy_registry.list_policies() == {}


class TestPolicyResolution:
    """Tests for walking the ancestry to find a policy."""

    def test_subclass_uses_ancestor_policy(self, policy_registry: PolicyRegistry):
        """Test a subclass without its own policy gets its parent's."""
        policy_registry.register(Account, AccountPolicy)
        assert policy_registry.resolve(SecretAccount) is AccountPolicy

    def test_subclass_policy_takes_priority(self, policy_registry: PolicyRegistry):
        """Test a more specific policy wins over the ancestor's."""
        class SecretAccountPolicy(Policy):
            pass

        policy_registry.register(Account, AccountPolicy)
        policy_registry.register(SecretAccount, SecretAccountPolicy)

        assert policy_registry.resolve(SecretAccount) is SecretAccountPolicy
        assert policy_registry.resolve(Account) is AccountPolicy

    def test_no_policy_returns_default(self, policy_registry: PolicyRegistry):
        """Test the default policy is used when nothing matches."""
        assert policy_registry.resolve(Client) is DenyAllPolicy

    def test_custom_default_policy(self):
        """Test a configured default policy."""
        registry = PolicyRegistry(default_policy=AllowAllPolicy, persistence_base=Model)
        assert registry.resolve(Client) is AllowAllPolicy

        registry.set_default_policy(None)
        assert registry.resolve(Client) is DenyAllPolicy

    def test_lineage_stops_at_persistence_base(self, policy_registry: PolicyRegistry):
        """Test the walk excludes the base and everything above it."""
        assert policy_registry.lineage(SecretAccount) == (SecretAccount, Account)

    def test_policy_on_base_is_never_used(self, policy_registry: PolicyRegistry):
        """Test a policy registered for the persistence base is ignored."""
        policy_registry.register(Model, AllowAllPolicy)
        assert policy_registry.resolve(Account) is DenyAllPolicy

    def test_base_itself_gets_default(self, policy_registry: PolicyRegistry):
        """Test resolving the base or an ancestor of it uses the default."""
        assert policy_registry.lineage(Model) == ()
        assert policy_registry.lineage(object) == ()
        assert policy_registry.resolve(Model) is DenyAllPolicy

    def test_mixins_are_part_of_the_lineage(self, policy_registry: PolicyRegistry):
        """Test classes mixed into the hierarchy are probed in MRO order."""
        class Auditable:
            pass

        class Ledger(Auditable, Model):
            pass

        class AuditablePolicy(Policy):
            pass

        policy_registry.register(Auditable, AuditablePolicy)

        assert policy_registry.lineage(Ledger) == (Ledger, Auditable)
        assert policy_registry.resolve(Ledger) is AuditablePolicy

    def test_unrelated_class_walks_to_object(self, policy_registry: PolicyRegistry):
        """Test classes outside the model hierarchy are still resolvable."""
        class Report:
            pass

        class QuarterlyReport(Report):
            pass

        class ReportPolicy(Policy):
            pass

        policy_registry.register(Report, ReportPolicy)
        assert policy_registry.resolve(QuarterlyReport) is ReportPolicy

    def test_class_registration_beats_name_registration(self, policy_registry: PolicyRegistry):
        """Test that for one class, a class key is checked before its name."""
        class ByName(Policy):
            pass

        policy_registry.register("Account", ByName)
        policy_registry.register(Account, AccountPolicy)
        assert policy_registry.resolve(Account) is AccountPolicy

    def test_resolution_never_raises(self):
        """Test an empty registry resolves anything to the default."""
        registry = PolicyRegistry()
        assert registry.resolve(int) is DenyAllPolicy
        assert registry.resolve(object) is DenyAllPolicy


class TestGlobalRegistry:
    """Tests for the module-level registry."""

    def test_global_registry_is_singleton(self):
        """Test the global registry is created once."""
        reset_global_registry()
        try:
            assert get_global_registry() is get_global_registry()
        finally:
            reset_global_registry()

    def test_reset_global_registry(self):
        """Test resetting creates a fresh, empty registry."""
        registry = get_global_registry()
        registry.register(Account, AccountPolicy)

        reset_global_registry()

        assert get_global_registry() is not registry
        assert get_global_registry().resolve(Account) is DenyAllPolicy
        reset_global_registry()
