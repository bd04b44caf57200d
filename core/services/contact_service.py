# =============================================================================
# core/services/contact_service.py - Contact Business Logic
# =============================================================================
# Handles contact CRUD against the `contacts` table.
# =============================================================================

import logging

from lib.supabase_client import SupabaseClient
from core.models.contact import Contact, ContactData
from core.models.session import UserSession
from core.services.client_service import ClientService
from app.exceptions import ContactNotFoundError

logger = logging.getLogger(__name__)

TABLE = "contacts"


class ContactService:
    """Service for contact records, scoped to the session user."""

    @staticmethod
    def list_contacts(session: UserSession) -> list[Contact]:
        """All contacts of the user, ordered by name."""
        rows = SupabaseClient.fetch_rows(TABLE, session.user_id, order_by="full_name")
        return [Contact(**row) for row in rows]

    @staticmethod
    def list_contacts_for_client(session: UserSession, client_id: str) -> list[Contact]:
        """Contacts of one client, ordered by name."""
        rows = SupabaseClient.fetch_rows(
            TABLE,
            session.user_id,
            order_by="full_name",
            filters={"client_id": client_id},
        )
        return [Contact(**row) for row in rows]

    @staticmethod
    def get_contact(session: UserSession, contact_id: str) -> Contact:
        """
        Get a contact by ID.

        Raises:
            ContactNotFoundError: If it doesn't exist or belongs to another user
        """
        row = SupabaseClient.fetch_row(TABLE, contact_id, session.user_id)
        if not row:
            raise ContactNotFoundError(str(contact_id))
        return Contact(**row)

    @staticmethod
    def create_contact(session: UserSession, data: ContactData) -> Contact:
        """
        Insert a contact for one of the user's clients.

        Raises:
            ClientNotFoundError: If the client isn't the user's
        """
        ClientService.get_client(session, data.client_id)

        row = data.to_row()
        row["user_id"] = session.user_id

        created = SupabaseClient.insert_row(TABLE, row)
        logger.info(f"Created contact: {created.get('id')} for client: {data.client_id}")
        return Contact(**created)

    @staticmethod
    def update_contact(session: UserSession, contact_id: str, data: ContactData) -> Contact:
        """
        Update a contact, possibly moving it to another of the user's clients.

        Raises:
            ClientNotFoundError: If the target client isn't the user's
            ContactNotFoundError: If no row matched
        """
        ClientService.get_client(session, data.client_id)

        updated = SupabaseClient.update_row(TABLE, contact_id, session.user_id, data.to_row())
        if not updated:
            raise ContactNotFoundError(str(contact_id))
        return Contact(**updated)

    @staticmethod
    def delete_contact(session: UserSession, contact_id: str) -> None:
        """
        Delete a contact.

        Raises:
            ContactNotFoundError: If no row matched
        """
        if not SupabaseClient.delete_row(TABLE, contact_id, session.user_id):
            raise ContactNotFoundError(str(contact_id))
