# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides sample client/contact rows and a user session
# - A FakeTable that stands in for SupabaseClient's table helpers
# =============================================================================

import os
from datetime import date

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from core.models import Client, Contact, UserSession

USER_ID = "0f6a1b2c-0000-4000-8000-000000000001"


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def session() -> UserSession:
    return UserSession(user_id=USER_ID, email="owner@ex.com", access_token="token")


def make_client(
    client_id: str,
    full_name: str,
    foto_url: str | None = None,
    registration_date: date = date(2024, 1, 15),
    emails: list[str] | None = None,
    phones: list[str] | None = None,
) -> Client:
    return Client(
        id=client_id,
        user_id=USER_ID,
        full_name=full_name,
        emails=emails or [f"{client_id}@ex.com"],
        phones=phones or ["(11) 99999-0000"],
        registration_date=registration_date,
        foto_url=foto_url,
    )


def make_contact(contact_id: str, client_id: str, full_name: str) -> Contact:
    return Contact(
        id=contact_id,
        client_id=client_id,
        user_id=USER_ID,
        full_name=full_name,
        emails=[f"{contact_id}@ex.com"],
        phones=["(21) 98888-7777"],
    )


@pytest.fixture
def clients() -> list[Client]:
    """Three clients, alphabetical."""
    return [
        make_client("c1", "Ana Silva", foto_url="c1/1700000000000_ana.png"),
        make_client("c2", "Bruno Costa", emails=["bruno@empresa.com"]),
        make_client("c3", "Élio Souza", phones=["(31) 97777-6666"]),
    ]


@pytest.fixture
def contacts() -> list[Contact]:
    return [
        make_contact("k1", "c1", "Carla Dias"),
        make_contact("k2", "c1", "Diego Lima"),
        make_contact("k3", "c2", "Zoe Prado"),
    ]
