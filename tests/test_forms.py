# =============================================================================
# tests/test_forms.py - Client and Contact Form Tests
# =============================================================================
# Walks the submit state machine with a HeadlessPrompter and a fake
# storage class; persistence is a plain callback.
# =============================================================================

from datetime import date
from unittest.mock import MagicMock

import pytest

from app.exceptions import PersistenceError
from core.forms import ClientForm, ContactForm, FormState, _RecordForm
from core.models import ClientData, ContactData
from core.services.alerts import HeadlessPrompter
from lib.phone import PHONE_MASK
from tests.conftest import make_client, make_contact

PNG = b"\x89PNG\r\n\x1a\n" + b"0" * 32


@pytest.fixture
def storage():
    fake = MagicMock()
    fake.upload_client_image.return_value = "user/1700000000000_new.png"
    return fake


def fill_valid(form):
    form.set_full_name("Ana Silva")
    form.update_email(0, "ana@ex.com")
    form.update_phone(0, "(11) 99999-0000")


# =============================================================================
# Client Form
# =============================================================================

class TestRecordFormBase:

    def test_base_form_is_abstract(self, session):
        with pytest.raises(TypeError):
            _RecordForm(session, HeadlessPrompter(), on_submit=lambda data: None)


class TestClientFormSubmit:

    def test_create_closes_and_reports_success(self, session, storage):
        saved = []
        prompter = HeadlessPrompter(confirm=True)
        form = ClientForm(session, prompter, on_submit=saved.append, storage=storage)
        fill_valid(form)

        state = form.submit()

        assert state == FormState.CLOSED
        data = saved[0]
        assert isinstance(data, ClientData)
        assert data.full_name == "Ana Silva"
        assert data.emails == ["ana@ex.com"]
        assert data.phones == ["(11) 99999-0000"]
        assert data.registration_date == date.today()
        assert data.foto_url is None
        assert [a.kind for a in prompter.alerts] == ["question", "success"]
        assert prompter.last.text == "Cliente criado com sucesso."
        storage.upload_client_image.assert_not_called()

    def test_blank_entries_are_dropped(self, session, storage):
        saved = []
        form = ClientForm(session, HeadlessPrompter(), on_submit=saved.append, storage=storage)
        fill_valid(form)
        form.add_email()
        form.add_phone()
        form.update_phone(1, "  ")

        form.submit()

        assert saved[0].emails == ["ana@ex.com"]
        assert saved[0].phones == ["(11) 99999-0000"]

    def test_validation_failure_stays_idle(self, session, storage):
        on_submit = MagicMock()
        prompter = HeadlessPrompter()
        form = ClientForm(session, prompter, on_submit=on_submit, storage=storage)
        form.set_full_name("Ana")
        form.update_email(0, "not-an-email")
        form.update_phone(0, "(11) 99999-0000")

        state = form.submit()

        assert state == FormState.IDLE
        assert prompter.last.kind == "validation"
        assert prompter.last.text == "E-mail inválido: not-an-email"
        on_submit.assert_not_called()

    def test_declined_confirmation(self, session, storage):
        on_submit = MagicMock()
        prompter = HeadlessPrompter(confirm=False)
        form = ClientForm(session, prompter, on_submit=on_submit, storage=storage)
        fill_valid(form)

        assert form.submit() == FormState.IDLE
        assert [a.kind for a in prompter.alerts] == ["question"]
        on_submit.assert_not_called()

    def test_save_error_is_prompted(self, session, storage):
        prompter = HeadlessPrompter()
        form = ClientForm(
            session,
            prompter,
            on_submit=MagicMock(side_effect=PersistenceError("db down")),
            storage=storage,
        )
        fill_valid(form)

        assert form.submit() == FormState.IDLE
        assert isinstance(form.error, PersistenceError)
        assert prompter.last.kind == "error"
        assert prompter.last.text == "db down"

    def test_name_is_truncated(self, session, storage):
        form = ClientForm(session, HeadlessPrompter(), on_submit=MagicMock(), storage=storage)
        form.set_full_name("x" * 200)

        assert len(form.full_name) == 80

    def test_last_email_field_stays(self, session, storage):
        form = ClientForm(session, HeadlessPrompter(), on_submit=MagicMock(), storage=storage)
        form.remove_email(0)

        assert form.emails == [""]


class TestClientFormEdit:

    def test_edit_keeps_registration_date(self, session, storage):
        client = make_client("c1", "Ana", registration_date=date(2020, 5, 1))
        saved = []
        prompter = HeadlessPrompter()
        form = ClientForm(session, prompter, on_submit=saved.append, client=client, storage=storage)

        form.submit()

        assert saved[0].registration_date == date(2020, 5, 1)
        assert prompter.last.text == "Cliente atualizado com sucesso."

    def test_new_photo_replaces_old_one(self, session, storage):
        client = make_client("c1", "Ana", foto_url="c1/1600000000000_old.png")
        saved = []
        form = ClientForm(session, HeadlessPrompter(), on_submit=saved.append, client=client, storage=storage)

        assert form.set_image("new.png", PNG, "image/png")
        form.submit()

        storage.upload_client_image.assert_called_once()
        assert storage.upload_client_image.call_args.kwargs["prefix"] == "c1"
        storage.remove_file.assert_called_once_with("c1/1600000000000_old.png")
        assert saved[0].foto_url == "user/1700000000000_new.png"

    def test_remove_photo(self, session, storage):
        client = make_client("c1", "Ana", foto_url="c1/old.png")
        saved = []
        form = ClientForm(session, HeadlessPrompter(), on_submit=saved.append, client=client, storage=storage)

        form.remove_image()
        form.submit()

        storage.remove_file.assert_called_once_with("c1/old.png")
        assert saved[0].foto_url is None

    def test_failed_old_photo_removal_does_not_block_save(self, session, storage):
        storage.remove_file.side_effect = RuntimeError("gone")
        client = make_client("c1", "Ana", foto_url="c1/old.png")
        form = ClientForm(session, HeadlessPrompter(), on_submit=MagicMock(), client=client, storage=storage)
        form.set_image("new.png", PNG, "image/png")

        assert form.submit() == FormState.CLOSED

    def test_invalid_image_is_rejected(self, session, storage):
        prompter = HeadlessPrompter()
        form = ClientForm(session, prompter, on_submit=MagicMock(), storage=storage)

        assert not form.set_image("notes.txt", b"hello", "text/plain")
        assert form.local_file is None
        assert prompter.last.text == "O arquivo deve ser jpeg, jpg, png ou svg."


# =============================================================================
# Contact Form
# =============================================================================

class TestContactForm:

    def test_create(self, session):
        saved = []
        prompter = HeadlessPrompter()
        form = ContactForm(session, prompter, on_submit=saved.append, client_id="c1")
        form.fill("Carla Dias", ["carla@ex.com"], ["(21) 98888-7777"])

        assert form.submit() == FormState.CLOSED
        assert saved[0] == ContactData(
            full_name="Carla Dias",
            emails=["carla@ex.com"],
            phones=["(21) 98888-7777"],
            client_id="c1",
        )
        assert prompter.last.text == "Contato criado com sucesso."

    def test_update_message(self, session):
        contact = make_contact("k1", "c1", "Carla")
        prompter = HeadlessPrompter()
        form = ContactForm(session, prompter, on_submit=MagicMock(), client_id="c1", contact=contact)

        form.submit()

        assert prompter.last.text == "Contato atualizado com sucesso."

    def test_masks_follow_phone_fields(self, session):
        form = ContactForm(session, HeadlessPrompter(), on_submit=MagicMock(), client_id="c1")
        form.add_phone()
        form.update_phone(1, "11999990000")

        assert form.masks == [PHONE_MASK, PHONE_MASK]

        form.remove_phone(0)

        assert len(form.masks) == len(form.phones) == 1

    def test_invalid_phone(self, session):
        prompter = HeadlessPrompter()
        form = ContactForm(session, prompter, on_submit=MagicMock(), client_id="c1")
        form.fill("Carla", ["carla@ex.com"], ["123"])

        assert form.submit() == FormState.IDLE
        assert prompter.last.text == "Telefone inválido: 123"
