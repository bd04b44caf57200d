# =============================================================================
# app/routers/contacts.py - Contact Endpoints
# =============================================================================
# The contacts screen: clients grouped by initial with their contacts, plus
# contact create/edit/delete and per-contact PDF export.
# All endpoints require authentication.
# =============================================================================

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.dependencies import SessionDep
from app.routers.outcomes import download, raise_for_delete, raise_for_form, raise_for_load
from core.forms import ContactForm
from core.lists import ContactListView
from core.models.common import OperationResult
from core.models.contact import Contact, ContactDirectory, ContactInput
from core.services.alerts import HeadlessPrompter
from core.services.contact_service import ContactService
from core.services.export_service import ExportService

logger = logging.getLogger(__name__)

router = APIRouter()


class ContactResult(OperationResult):
    """Outcome of a contact create/update/delete."""
    contact: Contact | None = None


def _result(form: ContactForm, prompter: HeadlessPrompter) -> ContactResult:
    success = prompter.last_of("success")
    return ContactResult(
        state=form.state.value,
        message=success.text if success else None,
        alerts=prompter.alerts,
        contact=form.result,
    )


@router.get("", response_model=ContactDirectory)
async def list_contacts(
    session: SessionDep,
    search: Annotated[str | None, Query(description="Client or contact name contains")] = None,
    selected: Annotated[str | None, Query(description="Contact to select")] = None,
):
    """
    Clients grouped by the first letter of their name, each with its contacts.

    Only letters with visible clients are returned. Without `selected`, the
    first contact is selected.
    """
    view = ContactListView(session, HeadlessPrompter())
    view.load()
    raise_for_load(view)

    view.set_search(search)
    if selected:
        view.select_contact(selected)

    groups = view.grouped()
    return ContactDirectory(
        groups=groups,
        contacts={c.id: view.contacts_for(c.id) for clients in groups.values() for c in clients},
        selected_contact_id=view.selected_contact_id,
        search=view.search,
    )


@router.get("/{contact_id}", response_model=Contact)
async def get_contact(
    contact_id: Annotated[str, Path(description="Contact UUID")],
    session: SessionDep,
):
    return ContactService.get_contact(session, contact_id)


@router.post("", response_model=ContactResult, status_code=201)
async def create_contact(request: ContactInput, session: SessionDep):
    """
    Add a contact to one of the user's clients.

    422 on invalid input, 404 for an unknown client, 409 when confirm is false.
    """
    prompter = HeadlessPrompter(confirm=request.confirm)
    form = ContactForm(
        session,
        prompter,
        on_submit=lambda data: ContactService.create_contact(session, data),
        client_id=request.client_id,
    )
    form.fill(request.full_name, request.emails, request.phones)

    form.submit()
    raise_for_form(form, prompter, "create")
    return _result(form, prompter)


@router.put("/{contact_id}", response_model=ContactResult)
async def update_contact(
    contact_id: Annotated[str, Path(description="Contact UUID")],
    request: ContactInput,
    session: SessionDep,
):
    existing = ContactService.get_contact(session, contact_id)

    prompter = HeadlessPrompter(confirm=request.confirm)
    form = ContactForm(
        session,
        prompter,
        on_submit=lambda data: ContactService.update_contact(session, contact_id, data),
        client_id=request.client_id or existing.client_id,
        contact=existing,
    )
    form.fill(request.full_name, request.emails, request.phones)

    form.submit()
    raise_for_form(form, prompter, "update")
    return _result(form, prompter)


@router.delete("/{contact_id}", response_model=ContactResult)
async def delete_contact(
    contact_id: Annotated[str, Path(description="Contact UUID")],
    session: SessionDep,
    confirm: Annotated[bool, Query(description="Answer to the delete confirmation")] = False,
):
    prompter = HeadlessPrompter(confirm=confirm)
    view = ContactListView(session, prompter)

    deleted = view.delete(contact_id)
    raise_for_delete(view, deleted, prompter)

    success = prompter.last_of("success")
    return ContactResult(
        state="deleted",
        message=success.text if success else None,
        alerts=prompter.alerts,
    )


@router.get("/{contact_id}/export.pdf")
async def export_contact(
    contact_id: Annotated[str, Path(description="Contact UUID")],
    session: SessionDep,
):
    """The contact with its client's header, as a PDF download."""
    document = await asyncio.to_thread(ExportService.export_contact_pdf, session, contact_id)
    return download(document)
