# =============================================================================
# tests/test_services.py - Client/Contact Service Tests
# =============================================================================
# SupabaseClient is patched where each service imports it, so these tests
# check the table contract: user scoping, ordering and not-found handling.
# =============================================================================

from datetime import date
from unittest.mock import patch

import pytest

from app.exceptions import ClientNotFoundError, ContactNotFoundError
from core.models import ClientData, ClientOrder, ContactData
from core.services.client_service import ClientService
from core.services.contact_service import ContactService
from tests.conftest import USER_ID


def client_row(**overrides):
    row = {
        "id": "c1",
        "user_id": USER_ID,
        "full_name": "Ana Silva",
        "emails": ["ana@ex.com"],
        "phones": ["(11) 99999-0000"],
        "registration_date": "2024-01-15",
        "foto_url": None,
    }
    row.update(overrides)
    return row


def contact_row(**overrides):
    row = {
        "id": "k1",
        "client_id": "c1",
        "user_id": USER_ID,
        "full_name": "Carla Dias",
        "emails": ["carla@ex.com"],
        "phones": ["(21) 98888-7777"],
    }
    row.update(overrides)
    return row


@pytest.fixture
def db():
    with patch("core.services.client_service.SupabaseClient") as client_db, \
            patch("core.services.contact_service.SupabaseClient", client_db):
        yield client_db


class TestClientService:

    def test_list_alphabetical(self, session, db):
        db.fetch_rows.return_value = [client_row()]

        clients = ClientService.list_clients(session)

        assert clients[0].registration_date == date(2024, 1, 15)
        db.fetch_rows.assert_called_once_with("clients", USER_ID, order_by="full_name")

    def test_list_by_registration(self, session, db):
        db.fetch_rows.return_value = []

        ClientService.list_clients(session, ClientOrder.REGISTRATION)

        db.fetch_rows.assert_called_once_with(
            "clients", USER_ID, order_by="registration_date", desc=True
        )

    def test_get_missing(self, session, db):
        db.fetch_row.return_value = None

        with pytest.raises(ClientNotFoundError):
            ClientService.get_client(session, "nope")

    def test_create_sets_owner_and_defaults(self, session, db):
        db.insert_row.return_value = client_row()

        ClientService.create_client(
            session, ClientData(full_name="Ana Silva", emails=["ana@ex.com"], phones=["1"])
        )

        table, row = db.insert_row.call_args.args
        assert table == "clients"
        assert row["user_id"] == USER_ID
        assert row["registration_date"] == date.today().isoformat()
        assert row["foto_url"] is None

    def test_update_never_sends_registration_date(self, session, db):
        db.update_row.return_value = client_row(full_name="Ana S.")

        updated = ClientService.update_client(
            session, "c1", ClientData(full_name="Ana S.", emails=["a@b.co"], phones=["1"])
        )

        row = db.update_row.call_args.args[3]
        assert "registration_date" not in row
        assert updated.full_name == "Ana S."

    def test_update_missing(self, session, db):
        db.update_row.return_value = None

        with pytest.raises(ClientNotFoundError):
            ClientService.update_client(
                session, "c1", ClientData(full_name="A", emails=[], phones=[])
            )

    def test_delete_missing(self, session, db):
        db.delete_row.return_value = False

        with pytest.raises(ClientNotFoundError):
            ClientService.delete_client(session, "c1")


class TestContactService:

    def test_list_for_client_filters(self, session, db):
        db.fetch_rows.return_value = [contact_row()]

        contacts = ContactService.list_contacts_for_client(session, "c1")

        assert contacts[0].full_name == "Carla Dias"
        db.fetch_rows.assert_called_once_with(
            "contacts", USER_ID, order_by="full_name", filters={"client_id": "c1"}
        )

    def test_create_requires_owned_client(self, session, db):
        db.fetch_row.return_value = None

        with pytest.raises(ClientNotFoundError):
            ContactService.create_contact(
                session,
                ContactData(full_name="Carla", emails=[], phones=[], client_id="other"),
            )
        db.insert_row.assert_not_called()

    def test_update_requires_owned_client(self, session, db):
        db.fetch_row.return_value = None

        with pytest.raises(ClientNotFoundError):
            ContactService.update_contact(
                session,
                "k1",
                ContactData(full_name="Carla", emails=[], phones=[], client_id="foreign"),
            )
        db.fetch_row.assert_called_once_with("clients", "foreign", USER_ID)
        db.update_row.assert_not_called()

    def test_update_moves_to_owned_client(self, session, db):
        db.fetch_row.return_value = client_row(id="c2")
        db.update_row.return_value = contact_row(client_id="c2")

        contact = ContactService.update_contact(
            session,
            "k1",
            ContactData(full_name="Carla Dias", emails=[], phones=[], client_id="c2"),
        )

        assert contact.client_id == "c2"
        assert db.update_row.call_args.args[:3] == ("contacts", "k1", USER_ID)

    def test_create(self, session, db):
        db.fetch_row.return_value = client_row()
        db.insert_row.return_value = contact_row()

        contact = ContactService.create_contact(
            session,
            ContactData(full_name="Carla Dias", emails=[], phones=[], client_id="c1"),
        )

        assert contact.id == "k1"
        assert db.insert_row.call_args.args[1]["user_id"] == USER_ID

    def test_get_missing(self, session, db):
        db.fetch_row.return_value = None

        with pytest.raises(ContactNotFoundError):
            ContactService.get_contact(session, "k9")

    def test_delete(self, session, db):
        db.delete_row.return_value = True

        ContactService.delete_contact(session, "k1")

        db.delete_row.assert_called_once_with("contacts", "k1", USER_ID)
