# =============================================================================
# app/routers/outcomes.py - Form and Delete Outcomes as HTTP Errors
# =============================================================================
# Forms and list views report failures through prompts and end in the idle
# state instead of raising. These helpers turn such an outcome into the
# matching exception:
# - save/delete error    -> the CadastroException raised, else 500
# - validation prompt    -> 422 with the validation message
# - declined confirmation -> 409
# =============================================================================

from fastapi.responses import Response

from app.exceptions import (
    CadastroException,
    ConfirmationDeclinedError,
    PersistenceError,
    ValidationFailedError,
)
from core.forms import FormState
from core.services.alerts import HeadlessPrompter
from core.services.export_service import ExportedDocument


def _alerts(prompter: HeadlessPrompter) -> list[dict]:
    return [a.model_dump() for a in prompter.alerts]


def _raise_error(error: Exception, prompter: HeadlessPrompter, fallback: str) -> None:
    if isinstance(error, CadastroException):
        raise error
    failure = prompter.last_of("error")
    raise PersistenceError(failure.text if failure else fallback, _alerts(prompter))


def raise_for_form(form, prompter: HeadlessPrompter, action: str) -> None:
    """Raise unless the form closed (saved)."""
    if form.state == FormState.CLOSED:
        return

    if form.error is not None:
        _raise_error(form.error, prompter, f"Failed to {action} {form.ENTITY}")

    validation = prompter.last_of("validation")
    if validation:
        raise ValidationFailedError(validation.text, _alerts(prompter))

    raise ConfirmationDeclinedError(action, form.ENTITY)


def raise_for_delete(view, deleted: bool, prompter: HeadlessPrompter) -> None:
    """Raise unless the view's delete went through."""
    if deleted:
        return
    if view.error is not None:
        _raise_error(view.error, prompter, f"Failed to delete {view.ENTITY}")
    raise ConfirmationDeclinedError("delete", view.ENTITY)


def raise_for_load(view) -> None:
    if view.load_error is not None:
        _raise_error(view.load_error, HeadlessPrompter(), f"Failed to load {view.ENTITY} list")


def download(document: ExportedDocument) -> Response:
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": document.content_disposition},
    )
