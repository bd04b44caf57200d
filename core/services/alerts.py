# =============================================================================
# core/services/alerts.py - Confirmation and Alert Prompts
# =============================================================================
# The forms and lists talk to the user through a Prompter:
# - confirm_save / confirm_delete return the user's answer
# - success / error / validation show a message
#
# HeadlessPrompter is what the HTTP layer uses: the request itself carries
# the confirmation answer, and every prompt is recorded so it can be sent
# back in the response.
# =============================================================================

import logging
from abc import ABC, abstractmethod

from core.models.common import Alert

logger = logging.getLogger(__name__)


# =============================================================================
# Message Builders
# =============================================================================

def confirm_save_text(is_edit: bool, entity: str) -> str:
    return f"Salvar alterações deste {entity}?" if is_edit else f"Criar novo {entity}?"


def confirm_delete_text(entity: str) -> str:
    return f"Deseja realmente excluir este {entity}? Esta ação não pode ser desfeita."


# =============================================================================
# Prompter Interface
# =============================================================================

class Prompter(ABC):
    """Dialogs shown during a form submit or a delete."""

    @abstractmethod
    def confirm_save(self, is_edit: bool, entity: str) -> bool:
        """Ask before creating/updating; True means go ahead."""

    @abstractmethod
    def confirm_delete(self, entity: str) -> bool:
        """Ask before deleting; True means go ahead."""

    @abstractmethod
    def success(self, message: str) -> None:
        ...

    @abstractmethod
    def error(self, title: str, message: str) -> None:
        ...

    @abstractmethod
    def validation(self, message: str) -> None:
        ...


class HeadlessPrompter(Prompter):
    """
    Prompter without a user at the keyboard.

    Confirmations are answered with `confirm`; every prompt is appended
    to `alerts` in the order it was shown.

    Example:
        prompter = HeadlessPrompter(confirm=True)
        view.delete(client_id)
        prompter.alerts[-1].text  # "Cliente removido com sucesso."
    """

    def __init__(self, confirm: bool = True):
        self.confirm = confirm
        self.alerts: list[Alert] = []

    def _record(self, kind: str, title: str, text: str) -> None:
        self.alerts.append(Alert(kind=kind, title=title, text=text))

    def confirm_save(self, is_edit: bool, entity: str) -> bool:
        self._record("question", "Confirmação", confirm_save_text(is_edit, entity))
        return self.confirm

    def confirm_delete(self, entity: str) -> bool:
        self._record("warning", "Confirmação", confirm_delete_text(entity))
        return self.confirm

    def success(self, message: str) -> None:
        self._record("success", "Sucesso", message)

    def error(self, title: str, message: str) -> None:
        self._record("error", title, message)

    def validation(self, message: str) -> None:
        self._record("validation", "Validação", message)

    @property
    def last(self) -> Alert | None:
        return self.alerts[-1] if self.alerts else None

    def last_of(self, kind: str) -> Alert | None:
        """Most recent alert of a kind ("success", "error", ...)."""
        for alert in reversed(self.alerts):
            if alert.kind == kind:
                return alert
        return None
