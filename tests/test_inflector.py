"""
Tests for naming rules.
"""

from __future__ import annotations

from tests.models import Account, Lottery, SecretAccount
from warrant.inflector import (
    association_accessor,
    classify_name,
    demodulized_var_name,
    is_namespaced,
    model_name,
    plural_name,
    singular_name,
    underscore_path,
    var_name,
)
from warrant.persistence import Model


class Invoice(Model):
    __model_name__ = "Billing::Invoice"


class TestModelName:
    """Tests for deriving model names from classes."""

    def test_plain_class(self):
        assert model_name(Account) == "Account"
        assert is_namespaced(Account) is False

    def test_nested_class_is_namespaced(self):
        """Test nested classes use their enclosing class as a namespace."""
        assert model_name(Lottery.Package) == "Lottery::Package"
        assert is_namespaced(Lottery.Package) is True

    def test_explicit_model_name(self):
        """Test an explicit __model_name__ wins over the qualified name."""
        assert model_name(Invoice) == "Billing::Invoice"

    def test_explicit_model_name_is_not_inherited(self):
        class CreditNote(Invoice):
            pass

        assert model_name(CreditNote).endswith("CreditNote")


class TestParameterKeys:
    """Tests for parameter key names."""

    def test_var_name(self):
        assert var_name(Account) == "account"
        assert var_name(SecretAccount) == "secret_account"

    def test_var_name_flattens_namespaces(self):
        assert var_name(Lottery.Package) == "lottery_package"
        assert var_name(Invoice) == "billing_invoice"

    def test_demodulized_var_name(self):
        assert demodulized_var_name(Lottery.Package) == "package"
        assert demodulized_var_name(SecretAccount) == "secret_account"

    def test_demodulized_var_name_explicit_namespace(self):
        """Test only the last namespace segment is kept."""
        assert demodulized_var_name(Invoice) == "invoice"
        assert association_accessor(Invoice) == "invoices"


class TestPathNames:
    """Tests for names derived from declared resource paths."""

    def test_underscore_path(self):
        assert underscore_path("Lottery::Package") == "lottery/package"
        assert underscore_path("Lottery.Package") == "lottery/package"
        assert underscore_path("lottery/packages") == "lottery/packages"

    def test_classify_plural_path(self):
        assert classify_name("accounts") == "Account"
        assert classify_name("secret_accounts") == "SecretAccount"
        assert classify_name("lottery/packages") == "Lottery::Package"

    def test_classify_keeps_existing_model_name(self):
        assert classify_name("Lottery::Package") == "Lottery::Package"
        assert classify_name("Account") == "Account"

    def test_singular_name_uses_last_segment(self):
        assert singular_name("accounts") == "account"
        assert singular_name("account") == "account"
        assert singular_name("lottery/packages") == "package"

    def test_plural_name_uses_whole_path(self):
        assert plural_name("accounts") == "accounts"
        assert plural_name("account") == "accounts"
        assert plural_name("lottery/packages") == "lottery_packages"


class TestAssociationAccessor:
    """Tests for conventional association accessor names."""

    def test_association_accessor(self):
        assert association_accessor(Account) == "accounts"
        assert association_accessor(SecretAccount) == "secret_accounts"

    def test_association_accessor_drops_namespace(self):
        assert association_accessor(Lottery.Prize) == "prizes"
