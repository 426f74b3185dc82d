"""
Pytest fixtures for Warrant tests.

Provides common fixtures used across all test modules.
"""

from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass, field

import pytest

from tests.models import ALL_MODELS, ARCHIVES, Account, Client, Lottery, SecretAccount
from warrant import Policy, Warrant, WarrantConfig
from warrant.context import reset_actor, set_actor
from warrant.persistence import InMemoryAdapter, Model
from warrant.policies.registry import PolicyRegistry


# ============================================================================
# Actor Fixtures
# ============================================================================


@dataclass(frozen=True)
class User:
    """Minimal actor used by the test policies."""
    user_id: str
    roles: list[str] = field(default_factory=list)

    def has_role(self, role: str) -> bool:
        return role in self.roles


@pytest.fixture
def admin_user() -> User:
    """Create an admin user."""
    return User(user_id="admin_456", roles=["admin", "user"])


@pytest.fixture
def basic_user() -> User:
    """Create a basic user."""
    return User(user_id="user_123", roles=["user"])


@pytest.fixture(autouse=True)
def clean_actor() -> Generator[None, None, None]:
    """Make sure no actor leaks between tests."""
    token = set_actor(None)
    yield
    reset_actor(token)


# ============================================================================
# Persistence Fixtures
# ============================================================================


@pytest.fixture
def adapter() -> Generator[InMemoryAdapter, None, None]:
    """Create an in-memory adapter knowing all test models."""
    yield InMemoryAdapter(*ALL_MODELS)
    ARCHIVES.clear()


@pytest.fixture
def client(adapter: InMemoryAdapter) -> Client:
    """A saved client with id 7."""
    return adapter.save(Client(id=7, name="Acme"))


@pytest.fixture
def account(adapter: InMemoryAdapter, client: Client) -> Account:
    """A saved account belonging to the client."""
    return adapter.save(Account(name="Main", client_id=client.id))


@pytest.fixture
def secret_account(adapter: InMemoryAdapter, client: Client) -> SecretAccount:
    """A saved secret account belonging to the client."""
    return adapter.save(SecretAccount(name="Vault", client_id=client.id))


@pytest.fixture
def package(adapter: InMemoryAdapter) -> Lottery.Package:
    """A saved lottery package with id 3."""
    return adapter.save(Lottery.Package(id=3, title="Summer"))


# ============================================================================
# Policy Fixtures
# ============================================================================


class AccountPolicy(Policy):
    """Admins manage accounts; users may only look at them."""

    def can_index(self) -> bool:
        return self.actor is not None

    def can_show(self) -> bool:
        return self.actor is not None

    def can_new(self) -> bool:
        return self.actor is not None and self.actor.has_role("admin")

    can_create = can_new
    can_update = can_new
    can_destroy = can_new


class ClientPolicy(Policy):
    def can_show(self) -> bool:
        return True


@pytest.fixture
def policy_registry() -> PolicyRegistry:
    """Create a fresh policy registry bounded at the in-memory Model base."""
    return PolicyRegistry(persistence_base=Model)


@pytest.fixture
def warrant(adapter: InMemoryAdapter) -> Warrant:
    """Create a Warrant instance with the test policies registered."""
    instance = Warrant(adapter=adapter, config=WarrantConfig(persistence_base=Model))
    instance.register_policy(Account, AccountPolicy)
    instance.register_policy(Client, ClientPolicy)
    return instance
