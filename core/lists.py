# =============================================================================
# core/lists.py - Client and Contact List Orchestration
# =============================================================================
# The list screens fetch the whole collection, then filter, paginate and
# group locally. Every mutation is followed by a full reload.
#
# - filter_clients / paginate / group_clients_by_letter: pure helpers
# - ClientListView / ContactListView: per-screen state and delete flow
# =============================================================================

from __future__ import annotations

import logging
import math
import string
from typing import Iterable, Sequence, TypeVar

from app.config import settings
from core.models.client import Client, ClientData, ClientOrder
from core.models.common import Page
from core.models.contact import Contact, ContactData
from core.models.session import UserSession
from core.services.alerts import Prompter
from core.services.client_service import ClientService
from core.services.contact_service import ContactService
from core.services.storage_service import resolve_avatars

logger = logging.getLogger(__name__)

T = TypeVar("T")

OTHER_LETTER = "#"
ALPHABET = [*string.ascii_uppercase, OTHER_LETTER]


# =============================================================================
# Pure Helpers
# =============================================================================

def _contains(haystack: str | None, needle: str) -> bool:
    return needle in (haystack or "").lower()


def filter_clients(clients: Iterable[Client], search: str | None) -> list[Client]:
    """
    Case-insensitive substring search over name, e-mails and phones.

    A blank search returns every client.
    """
    q = (search or "").strip().lower()
    clients = list(clients)
    if not q:
        return clients
    return [
        c for c in clients
        if _contains(c.full_name, q)
        or _contains(" ".join(c.emails or []), q)
        or _contains(" ".join(c.phones or []), q)
    ]


def filter_clients_by_contacts(
    clients: Iterable[Client],
    contacts: Iterable[Contact],
    search: str | None,
) -> list[Client]:
    """Clients whose name, or any of their contacts' names, matches the search."""
    q = (search or "").strip().lower()
    clients = list(clients)
    if not q:
        return clients

    names_by_client: dict[str, list[str]] = {}
    for ct in contacts:
        names_by_client.setdefault(ct.client_id, []).append(ct.full_name or "")

    return [
        c for c in clients
        if _contains(c.full_name, q)
        or _contains(" ".join(names_by_client.get(c.id, [])), q)
    ]


def total_pages_for(count: int, page_size: int) -> int:
    return max(1, math.ceil(count / page_size))


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """
    Cut one page out of `items`.

    A page past the end falls back to page 1.
    """
    page_size = max(1, page_size)
    total = len(items)
    total_pages = total_pages_for(total, page_size)
    if page < 1 or page > total_pages:
        page = 1

    offset = (page - 1) * page_size
    chunk = list(items[offset:offset + page_size])
    return Page(
        items=chunk,
        page=page,
        page_size=page_size,
        total=total,
        total_pages=total_pages,
        start=offset + 1 if total else 0,
        end=min(page * page_size, total),
    )


def first_letter(name: str | None) -> str:
    ch = (name or "").strip()[:1].upper()
    return ch if ch in ALPHABET[:-1] else OTHER_LETTER


def group_clients_by_letter(clients: Iterable[Client]) -> dict[str, list[Client]]:
    """
    Bucket clients by the first letter of their name.

    Every letter A-Z and "#" is present, in that order, even when empty.
    Names starting with anything else (digits, accents) land in "#".
    """
    groups: dict[str, list[Client]] = {letter: [] for letter in ALPHABET}
    for c in clients:
        groups[first_letter(c.full_name)].append(c)
    return groups


# =============================================================================
# Client List
# =============================================================================

class ClientListView:
    """
    State of the client list screen.

    Example:
        view = ClientListView(session, prompter)
        view.load()
        view.set_search("ana")
        page = view.current_page()
    """

    ENTITY = "cliente"

    def __init__(
        self,
        session: UserSession,
        prompter: Prompter,
        order: ClientOrder = ClientOrder.ALPHABETICAL,
        page_size: int | None = None,
    ):
        self.session = session
        self.prompter = prompter
        self.order = order
        self.page_size = page_size or settings.DEFAULT_PAGE_SIZE
        self.page = 1
        self.search = ""
        self.clients: list[Client] = []
        self.avatars: dict[str, str] = {}
        self.loaded = False
        self.load_error: Exception | None = None
        self.error: Exception | None = None

    def load(self) -> list[Client]:
        """
        Re-fetch the full collection.

        A failed fetch is logged and leaves the previous list in place.
        """
        self.load_error = None
        try:
            self.clients = ClientService.list_clients(self.session, self.order)
            self.loaded = True
        except Exception as e:
            logger.error(f"Failed to load clients: {e}")
            self.load_error = e
        self._clamp_page()
        return self.clients

    # -------------------------------------------------------------------------
    # Search / order / pages
    # -------------------------------------------------------------------------

    @property
    def filtered(self) -> list[Client]:
        return filter_clients(self.clients, self.search)

    @property
    def total_pages(self) -> int:
        return total_pages_for(len(self.filtered), self.page_size)

    def _clamp_page(self) -> None:
        if self.page > self.total_pages:
            self.page = 1

    def set_search(self, search: str | None) -> None:
        """New search text; goes back to the first page."""
        self.search = search or ""
        self.page = 1

    def set_page_size(self, page_size: int) -> None:
        self.page_size = max(1, page_size)
        self._clamp_page()

    def set_order(self, order: ClientOrder) -> None:
        """Change ordering and reload, as the server does the sorting."""
        self.order = order
        self.load()

    def go_to_page(self, page: int) -> None:
        self.page = min(max(1, page), self.total_pages)

    def next_page(self) -> None:
        self.go_to_page(self.page + 1)

    def previous_page(self) -> None:
        self.go_to_page(self.page - 1)

    def current_page(self) -> Page[Client]:
        return paginate(self.filtered, self.page, self.page_size)

    async def load_avatars(self, clients: Iterable[Client] | None = None) -> dict[str, str]:
        """Resolve avatars for `clients` (default: the whole list)."""
        targets = list(self.clients if clients is None else clients)
        if not targets:
            return self.avatars
        self.avatars.update(await resolve_avatars(targets))
        return self.avatars

    # -------------------------------------------------------------------------
    # Persistence callbacks (handed to ClientForm)
    # -------------------------------------------------------------------------

    def handle_create(self, data: ClientData) -> Client:
        created = ClientService.create_client(self.session, data)
        self.load()
        return created

    def handle_update(self, client_id: str):
        """Build the on_submit callback for editing one client."""
        def on_submit(data: ClientData) -> Client:
            updated = ClientService.update_client(self.session, client_id, data)
            self.load()
            return updated
        return on_submit

    def delete(self, client_id: str) -> bool:
        """
        Confirm, delete, reload.

        Returns:
            True if the client was deleted
        """
        self.error = None
        if not self.prompter.confirm_delete(self.ENTITY):
            return False

        try:
            ClientService.delete_client(self.session, client_id)
            self.load()
            self.prompter.success("Cliente removido com sucesso.")
            return True
        except Exception as e:
            logger.exception(f"Failed to delete client {client_id}: {e}")
            self.error = e
            self.prompter.error(
                "Erro", getattr(e, "message", None) or str(e) or "Falha ao remover cliente."
            )
            return False


# =============================================================================
# Contact List
# =============================================================================

class ContactListView:
    """
    State of the contacts screen: clients grouped by letter, the contacts
    of each client, and one selected contact.
    """

    ENTITY = "contato"

    def __init__(self, session: UserSession, prompter: Prompter):
        self.session = session
        self.prompter = prompter
        self.clients: list[Client] = []
        self.contacts: list[Contact] = []
        self.search = ""
        self.selected_contact_id: str | None = None
        self.selected_client_id: str | None = None
        self.expanded: set[str] = set()
        self.load_error: Exception | None = None
        self.error: Exception | None = None

    def load(self) -> None:
        self.load_error = None
        self.load_clients()
        self.load_contacts()

    def load_clients(self) -> list[Client]:
        try:
            self.clients = ClientService.list_clients(self.session, ClientOrder.ALPHABETICAL)
        except Exception as e:
            logger.error(f"Failed to load clients: {e}")
            self.load_error = e
        return self.clients

    def load_contacts(self) -> list[Contact]:
        """Re-fetch contacts; the first one is selected if none is."""
        try:
            self.contacts = ContactService.list_contacts(self.session)
        except Exception as e:
            logger.error(f"Failed to load contacts: {e}")
            self.load_error = e
            return self.contacts

        if self.contacts and not self.selected_contact_id:
            self.selected_contact_id = self.contacts[0].id
        return self.contacts

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def set_search(self, search: str | None) -> None:
        self.search = search or ""

    def contacts_for(self, client_id: str) -> list[Contact]:
        return [ct for ct in self.contacts if ct.client_id == client_id]

    def grouped(self) -> dict[str, list[Client]]:
        """Letters with at least one visible client, in A-Z, "#" order."""
        groups = group_clients_by_letter(self.clients)
        if self.search.strip():
            matches = {c.id for c in filter_clients_by_contacts(self.clients, self.contacts, self.search)}
            groups = {k: [c for c in v if c.id in matches] for k, v in groups.items()}
        return {k: v for k, v in groups.items() if v}

    def toggle_client(self, client_id: str) -> bool:
        """Expand/collapse a client; returns True if it is now expanded."""
        self.selected_client_id = client_id
        if client_id in self.expanded:
            self.expanded.discard(client_id)
            return False
        self.expanded.add(client_id)
        return True

    def select_contact(self, contact_id: str) -> None:
        self.selected_contact_id = contact_id

    @property
    def selected_contact(self) -> Contact | None:
        return next((c for c in self.contacts if c.id == self.selected_contact_id), None)

    @property
    def selected_contact_client(self) -> Client | None:
        contact = self.selected_contact
        if not contact:
            return None
        return next((c for c in self.clients if c.id == contact.client_id), None)

    def default_client_id(self) -> str | None:
        """Client a new contact is attached to when none was picked."""
        return self.clients[0].id if self.clients else None

    # -------------------------------------------------------------------------
    # Persistence callbacks (handed to ContactForm)
    # -------------------------------------------------------------------------

    def handle_create(self, data: ContactData) -> Contact:
        created = ContactService.create_contact(self.session, data)
        self.load_contacts()
        return created

    def handle_update(self, contact_id: str):
        def on_submit(data: ContactData) -> Contact:
            updated = ContactService.update_contact(self.session, contact_id, data)
            self.load_contacts()
            return updated
        return on_submit

    def delete(self, contact_id: str) -> bool:
        """Confirm, delete, reload; drops the selection if it pointed here."""
        self.error = None
        if not self.prompter.confirm_delete(self.ENTITY):
            return False

        try:
            ContactService.delete_contact(self.session, contact_id)
            self.load_contacts()
            if self.selected_contact_id == contact_id:
                self.selected_contact_id = None
            self.prompter.success("Contato removido com sucesso.")
            return True
        except Exception as e:
            logger.exception(f"Failed to delete contact {contact_id}: {e}")
            self.error = e
            self.prompter.error(
                "Erro", getattr(e, "message", None) or str(e) or "Falha ao remover contato."
            )
            return False
