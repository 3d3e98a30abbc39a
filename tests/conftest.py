"""Pytest configuration and fixtures for trusted-auth tests."""

import os
from unittest.mock import MagicMock

import pytest

from trusted_auth.features.auth.entities.protocols import (
    IdentityAdapterProtocol,
    PersistenceStoreProtocol,
)
from trusted_auth.features.auth.entities.request import AuthRequest
from trusted_auth.features.users.repositories.document_store import InMemoryDocumentStore
from trusted_auth.features.users.services.user_manager import DefaultUserManager

from tests.fakes import DictPersistenceStore


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep TRUSTED_AUTH_* variables of the host out of the tests."""
    for key in list(os.environ):
        if key.upper().startswith("TRUSTED_AUTH_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def auth_request():
    """Plain request on a non logout page."""
    return AuthRequest(
        path="/bin/view/Main/WebHome",
        server_name="wiki.example.com",
        server_url="https://wiki.example.com",
        is_secure=True,
    )


@pytest.fixture
def logout_request():
    """Request on the logout page."""
    return AuthRequest(path="/bin/logout/XWiki/XWikiLogout", server_name="wiki.example.com")


@pytest.fixture
def document_store():
    """Empty in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def user_manager(document_store):
    """User manager over the in-memory document store."""
    return DefaultUserManager(document_store)


@pytest.fixture
def persistence_store():
    """In-memory persistence store."""
    return DictPersistenceStore()


@pytest.fixture
def mock_adapter():
    """Mock adapter, useful to assert that it was not called."""
    return MagicMock(spec=IdentityAdapterProtocol)


@pytest.fixture
def mock_persistence_store():
    """Mock persistence store."""
    return MagicMock(spec=PersistenceStoreProtocol)
