# =============================================================================
# app/routers/clients.py - Client Endpoints
# =============================================================================
# List, create, edit and delete clients, serve their avatar and export a
# client with its contacts as PDF.
#
# Create and edit are multipart so the photo can travel with the fields.
# All endpoints require authentication.
# =============================================================================

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, File, Form, Path, Query, UploadFile
from fastapi.responses import RedirectResponse

from app.dependencies import SessionDep
from app.exceptions import InvalidImageError
from app.routers.outcomes import download, raise_for_delete, raise_for_form, raise_for_load
from core.forms import ClientForm
from core.lists import ClientListView
from core.models.client import Client, ClientInput, ClientListResponse, ClientOrder
from core.models.common import OperationResult
from core.services.alerts import HeadlessPrompter
from core.services.client_service import ClientService
from core.services.export_service import ExportService
from core.services.storage_service import StorageService, resolve_avatars

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class ClientResult(OperationResult):
    """Outcome of a client create/update/delete."""
    client: Client | None = None


# =============================================================================
# Helpers
# =============================================================================

async def _attach_photo(form: ClientForm, photo: UploadFile | None) -> None:
    if photo is None or not photo.filename:
        return
    content = await photo.read()
    if not form.set_image(photo.filename, content, photo.content_type):
        rejected = form.prompter.last_of("validation")
        raise InvalidImageError(
            rejected.text if rejected else "Invalid image",
            photo.content_type,
            len(content),
        )


def _result(form: ClientForm, prompter: HeadlessPrompter) -> ClientResult:
    success = prompter.last_of("success")
    return ClientResult(
        state=form.state.value,
        message=success.text if success else None,
        alerts=prompter.alerts,
        client=form.result,
    )


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=ClientListResponse)
async def list_clients(
    session: SessionDep,
    search: Annotated[str | None, Query(description="Name, e-mail or phone contains")] = None,
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    page_size: Annotated[int | None, Query(ge=1, le=100, description="Items per page")] = None,
    order: Annotated[ClientOrder, Query(description="alphabetical or registration")] = ClientOrder.ALPHABETICAL,
):
    """
    One page of the client list, with avatar URLs for its rows.

    Search and pagination run over the full collection; a page past the end
    gives page 1.
    """
    view = ClientListView(session, HeadlessPrompter(), order=order, page_size=page_size)
    view.load()
    raise_for_load(view)

    view.set_search(search)
    view.page = page
    current = view.current_page()
    avatars = await resolve_avatars(current.items)

    return ClientListResponse(
        clients=current.items,
        avatars=avatars,
        total=current.total,
        page=current.page,
        page_size=current.page_size,
        total_pages=current.total_pages,
        start=current.start,
        end=current.end,
        order=order,
        search=view.search,
    )


@router.get("/{client_id}", response_model=Client)
async def get_client(
    client_id: Annotated[str, Path(description="Client UUID")],
    session: SessionDep,
):
    return ClientService.get_client(session, client_id)


@router.post("", response_model=ClientResult, status_code=201)
async def create_client(
    session: SessionDep,
    full_name: Annotated[str, Form()] = "",
    emails: Annotated[list[str], Form()] = [],
    phones: Annotated[list[str], Form()] = [],
    photo: Annotated[UploadFile | None, File(description="jpeg, png or svg, up to 2MB")] = None,
    confirm: Annotated[bool, Form(description="Answer to the save confirmation")] = True,
):
    """
    Register a client. The registration date is today.

    Returns the prompts shown along the way; 422 on invalid input, 409 when
    confirm is false.
    """
    prompter = HeadlessPrompter(confirm=confirm)
    form = ClientForm(
        session,
        prompter,
        on_submit=lambda data: ClientService.create_client(session, data),
    )
    fields = ClientInput(full_name=full_name, emails=emails, phones=phones)
    form.fill(fields.full_name, fields.emails, fields.phones)
    await _attach_photo(form, photo)

    form.submit()
    raise_for_form(form, prompter, "create")
    return _result(form, prompter)


@router.put("/{client_id}", response_model=ClientResult)
async def update_client(
    client_id: Annotated[str, Path(description="Client UUID")],
    session: SessionDep,
    full_name: Annotated[str, Form()] = "",
    emails: Annotated[list[str], Form()] = [],
    phones: Annotated[list[str], Form()] = [],
    photo: Annotated[UploadFile | None, File(description="Replacement photo")] = None,
    remove_photo: Annotated[bool, Form(description="Drop the stored photo")] = False,
    confirm: Annotated[bool, Form(description="Answer to the save confirmation")] = True,
):
    """
    Edit a client. The registration date never changes.

    A new photo replaces the stored one; remove_photo without a new photo
    clears it.
    """
    existing = ClientService.get_client(session, client_id)

    prompter = HeadlessPrompter(confirm=confirm)
    form = ClientForm(
        session,
        prompter,
        on_submit=lambda data: ClientService.update_client(session, client_id, data),
        client=existing,
    )
    fields = ClientInput(full_name=full_name, emails=emails, phones=phones)
    form.fill(fields.full_name, fields.emails, fields.phones)
    if remove_photo:
        form.remove_image()
    await _attach_photo(form, photo)

    form.submit()
    raise_for_form(form, prompter, "update")
    return _result(form, prompter)


@router.delete("/{client_id}", response_model=ClientResult)
async def delete_client(
    client_id: Annotated[str, Path(description="Client UUID")],
    session: SessionDep,
    confirm: Annotated[bool, Query(description="Answer to the delete confirmation")] = False,
):
    """Delete a client. Its contacts go with it (database cascade)."""
    prompter = HeadlessPrompter(confirm=confirm)
    view = ClientListView(session, prompter)

    deleted = view.delete(client_id)
    raise_for_delete(view, deleted, prompter)

    success = prompter.last_of("success")
    return ClientResult(
        state="deleted",
        message=success.text if success else None,
        alerts=prompter.alerts,
    )


@router.get("/{client_id}/avatar")
async def get_client_avatar(
    client_id: Annotated[str, Path(description="Client UUID")],
    session: SessionDep,
):
    """Redirect to a loadable image for the client (signed URL or placeholder)."""
    client = ClientService.get_client(session, client_id)
    url = await asyncio.to_thread(StorageService.resolve_client_image_url, client.foto_url)
    return RedirectResponse(url)


@router.get("/{client_id}/export.pdf")
async def export_client(
    client_id: Annotated[str, Path(description="Client UUID")],
    session: SessionDep,
):
    """The client and a table of its contacts, as a PDF download."""
    document = await asyncio.to_thread(ExportService.export_client_pdf, session, client_id)
    return download(document)
