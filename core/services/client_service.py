# =============================================================================
# core/services/client_service.py - Client Business Logic
# =============================================================================
# Handles client CRUD against the `clients` table.
# Separates HTTP concerns from database/business logic.
# =============================================================================

import logging

from lib.supabase_client import SupabaseClient
from core.models.client import Client, ClientData, ClientOrder
from core.models.session import UserSession
from app.exceptions import ClientNotFoundError

logger = logging.getLogger(__name__)

TABLE = "clients"


class ClientService:
    """
    Service for client records.

    Every call is scoped to the user in the given session.
    """

    @staticmethod
    def list_clients(
        session: UserSession,
        order: ClientOrder = ClientOrder.ALPHABETICAL,
    ) -> list[Client]:
        """
        Fetch all clients of the user.

        Args:
            session: Current user
            order: alphabetical (full_name asc) or registration (registration_date desc)

        Returns:
            List of Client
        """
        if order == ClientOrder.REGISTRATION:
            rows = SupabaseClient.fetch_rows(
                TABLE, session.user_id, order_by="registration_date", desc=True
            )
        else:
            rows = SupabaseClient.fetch_rows(TABLE, session.user_id, order_by="full_name")

        return [Client(**row) for row in rows]

    @staticmethod
    def get_client(session: UserSession, client_id: str) -> Client:
        """
        Get a client by ID.

        Raises:
            ClientNotFoundError: If it doesn't exist or belongs to another user
        """
        row = SupabaseClient.fetch_row(TABLE, client_id, session.user_id)
        if not row:
            raise ClientNotFoundError(str(client_id))
        return Client(**row)

    @staticmethod
    def create_client(session: UserSession, data: ClientData) -> Client:
        """
        Insert a new client owned by the session user.

        registration_date comes from the payload (today, unless the caller
        set it); a missing photo is stored as NULL.
        """
        row = data.to_row()
        row["user_id"] = session.user_id

        created = SupabaseClient.insert_row(TABLE, row)
        logger.info(f"Created client: {created.get('id')} for user: {session.user_id}")
        return Client(**created)

    @staticmethod
    def update_client(session: UserSession, client_id: str, data: ClientData) -> Client:
        """
        Update a client.

        The registration date is fixed at creation and is never sent.

        Raises:
            ClientNotFoundError: If no row matched
        """
        row = data.to_row()
        row.pop("registration_date", None)

        updated = SupabaseClient.update_row(TABLE, client_id, session.user_id, row)
        if not updated:
            raise ClientNotFoundError(str(client_id))
        return Client(**updated)

    @staticmethod
    def delete_client(session: UserSession, client_id: str) -> None:
        """
        Delete a client. Its contacts go with it (FK on delete cascade).

        Raises:
            ClientNotFoundError: If no row matched
        """
        if not SupabaseClient.delete_row(TABLE, client_id, session.user_id):
            raise ClientNotFoundError(str(client_id))
