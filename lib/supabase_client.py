# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and exposes the small table contract the services rely on:
# - select rows of a table for one user, with ordering and equality filters
# - fetch a single row by id
# - insert / update / delete a row
#
# The service_role key bypasses Row Level Security, so every query here is
# scoped to a user_id explicitly.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   rows = SupabaseClient.fetch_rows("clients", user_id, order_by="full_name")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no row matches
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Carries a code and a suggestion so callers can report how to fix it.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        clients = SupabaseClient.fetch_rows(
            "clients", user_id, order_by="registration_date", desc=True
        )
        SupabaseClient.delete_row("clients", client_id, user_id)
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def create_auth_client(cls) -> Client:
        """
        Create a short-lived client with the anon key.

        Sign-in stores the session on the client object, so auth calls get
        their own instance instead of the shared service client.
        """
        try:
            return create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create Supabase auth client: {e}",
                code="AUTH_CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file"
            )

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client (used by tests)."""
        cls._instance = None

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(uuid_value) if isinstance(uuid_value, UUID) else uuid_value

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_rows(
        cls,
        table: str,
        user_id: str | UUID,
        order_by: str | None = None,
        desc: bool = False,
        filters: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch every row of `table` owned by `user_id`.

        Args:
            table: Table name ("clients" or "contacts")
            user_id: Owner of the rows
            order_by: Column to sort by (optional)
            desc: Sort descending
            filters: Extra equality filters, e.g. {"client_id": "..."}

        Returns:
            List of row dicts (empty list when nothing matches)

        Raises:
            SupabaseClientError: If the query fails
        """
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)

        try:
            query = client.table(table).select("*").eq("user_id", user_id_str)
            for column, value in (filters or {}).items():
                query = query.eq(column, cls._normalize_uuid(value))
            if order_by:
                query = query.order(order_by, desc=desc)

            response = query.execute()
            rows = response.data or []

            logger.debug(f"Fetched {len(rows)} rows from {table} for user {user_id_str}")
            return rows

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch {table}: {e}",
                code="FETCH_ROWS_FAILED",
                suggestion=f"Check that the {table} table exists and is accessible",
                details={"table": table, "user_id": user_id_str, "filters": filters or {}},
            )

    @classmethod
    def fetch_row(
        cls,
        table: str,
        row_id: str | UUID,
        user_id: str | UUID,
    ) -> dict[str, Any] | None:
        """
        Fetch a single row by id.

        Returns:
            Row dict, or None if not found (or owned by someone else)

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        row_id_str = cls._normalize_uuid(row_id)

        try:
            response = (
                client.table(table)
                .select("*")
                .eq("id", row_id_str)
                .eq("user_id", cls._normalize_uuid(user_id))
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if NO_ROWS_CODE in str(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch row from {table}: {e}",
                code="FETCH_ROW_FAILED",
                suggestion="Check that the id is correct",
                details={"table": table, "id": row_id_str},
            )

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @classmethod
    def insert_row(cls, table: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a row and return it as stored.

        Raises:
            SupabaseClientError: If insert fails or returns nothing
        """
        client = cls.get_client()

        try:
            response = client.table(table).insert(data).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert into {table}: {e}",
                code="INSERT_FAILED",
                details={"table": table},
            )

        if not response.data:
            raise SupabaseClientError(
                message=f"Insert into {table} returned no data",
                code="INSERT_EMPTY",
                suggestion="Check the table's RLS policies and column defaults",
                details={"table": table},
            )

        row = response.data[0]
        logger.info(f"Inserted {table} row: {row.get('id')}")
        return row

    @classmethod
    def update_row(
        cls,
        table: str,
        row_id: str | UUID,
        user_id: str | UUID,
        data: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Update a row owned by `user_id`.

        Returns:
            The updated row, or None when no row matched

        Raises:
            SupabaseClientError: If update fails
        """
        client = cls.get_client()
        row_id_str = cls._normalize_uuid(row_id)

        try:
            response = (
                client.table(table)
                .update(data)
                .eq("id", row_id_str)
                .eq("user_id", cls._normalize_uuid(user_id))
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update {table} row: {e}",
                code="UPDATE_FAILED",
                details={"table": table, "id": row_id_str},
            )

        if not response.data:
            return None

        logger.info(f"Updated {table} row: {row_id_str}")
        return response.data[0]

    @classmethod
    def delete_row(
        cls,
        table: str,
        row_id: str | UUID,
        user_id: str | UUID,
    ) -> bool:
        """
        Delete a row owned by `user_id`.

        Returns:
            True if a row was deleted

        Raises:
            SupabaseClientError: If delete fails
        """
        client = cls.get_client()
        row_id_str = cls._normalize_uuid(row_id)

        try:
            response = (
                client.table(table)
                .delete()
                .eq("id", row_id_str)
                .eq("user_id", cls._normalize_uuid(user_id))
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete {table} row: {e}",
                code="DELETE_FAILED",
                details={"table": table, "id": row_id_str},
            )

        deleted = bool(response.data)
        if deleted:
            logger.info(f"Deleted {table} row: {row_id_str}")
        return deleted
