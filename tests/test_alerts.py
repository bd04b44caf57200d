# =============================================================================
# tests/test_alerts.py - Prompt Tests
# =============================================================================

from core.services.alerts import HeadlessPrompter, confirm_delete_text, confirm_save_text


class TestMessages:

    def test_confirm_save(self):
        assert confirm_save_text(False, "cliente") == "Criar novo cliente?"
        assert confirm_save_text(True, "contato") == "Salvar alterações deste contato?"

    def test_confirm_delete(self):
        assert confirm_delete_text("cliente") == (
            "Deseja realmente excluir este cliente? Esta ação não pode ser desfeita."
        )


class TestHeadlessPrompter:

    def test_confirm_answers_and_records(self):
        prompter = HeadlessPrompter(confirm=False)

        assert prompter.confirm_save(True, "cliente") is False
        assert prompter.confirm_delete("cliente") is False
        assert [a.kind for a in prompter.alerts] == ["question", "warning"]

    def test_last_of(self):
        prompter = HeadlessPrompter()
        prompter.error("Erro", "first")
        prompter.success("ok")
        prompter.error("Erro", "second")

        assert prompter.last_of("error").text == "second"
        assert prompter.last_of("validation") is None
        assert prompter.last.text == "second"

    def test_empty(self):
        assert HeadlessPrompter().last is None
