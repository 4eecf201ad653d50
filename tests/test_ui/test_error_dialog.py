import pytest

from qrbuild.ui import NoDialog, RetryDialog, SimpleDialog, render_error_dialog


class CallbackRecorder:
    def __init__(self):
        self.calls = []

    def callback(self, name: str):
        return lambda: self.calls.append(name)


@pytest.fixture
def recorder() -> CallbackRecorder:
    return CallbackRecorder()


class TestErrorDialog:
    def test_no_message_renders_nothing(self, recorder: CallbackRecorder):
        dialog = render_error_dialog(None, recorder.callback("dismiss"), recorder.callback("retry"))

        assert isinstance(dialog, NoDialog)
        assert not dialog.visible
        assert dialog.buttons == []
        assert recorder.calls == []

    def test_message_without_retry(self, recorder: CallbackRecorder):
        """Test a single OK button wired to dismiss."""
        dialog = render_error_dialog("Invalid QR code", recorder.callback("dismiss"))

        assert isinstance(dialog, SimpleDialog)
        assert not isinstance(dialog, RetryDialog)
        assert dialog.visible
        assert dialog.title == "Error"
        assert dialog.message == "Invalid QR code"
        assert dialog.text_align == "start"
        assert [b.label for b in dialog.buttons] == ["OK"]
        assert dialog.dismiss_button is None

        dialog.buttons[0].click()
        assert recorder.calls == ["dismiss"]

    def test_message_with_retry(self, recorder: CallbackRecorder):
        dialog = render_error_dialog(
            "Network unreachable", recorder.callback("dismiss"), recorder.callback("retry")
        )

        assert isinstance(dialog, RetryDialog)
        assert dialog.title == "Error"
        assert dialog.message == "Network unreachable"
        assert [b.label for b in dialog.buttons] == ["Retry", "OK"]

        dialog.button("Retry").click()
        assert recorder.calls == ["retry"]

        dialog.button("OK").click()
        assert recorder.calls == ["retry", "dismiss"]

    def test_host_dismissal_invokes_dismiss(self, recorder: CallbackRecorder):
        dialog = render_error_dialog(
            "Camera unavailable", recorder.callback("dismiss"), recorder.callback("retry")
        )

        dialog.request_dismiss()

        assert recorder.calls == ["dismiss"]

    def test_empty_message_is_still_shown(self, recorder: CallbackRecorder):
        dialog = render_error_dialog("", recorder.callback("dismiss"))

        assert dialog.visible
        assert dialog.message == ""

    def test_render_is_stateless(self, recorder: CallbackRecorder):
        dismiss = recorder.callback("dismiss")

        first = render_error_dialog("Timeout", dismiss)
        second = render_error_dialog("Timeout", dismiss)

        assert first == second
        assert isinstance(render_error_dialog(None, dismiss), NoDialog)
        assert recorder.calls == []

    def test_unknown_button(self, recorder: CallbackRecorder):
        dialog = render_error_dialog("Oops", recorder.callback("dismiss"))

        with pytest.raises(KeyError):
            dialog.button("Retry")

    def test_retry_dialog_requires_retry_callback(self, recorder: CallbackRecorder):
        with pytest.raises(TypeError):
            RetryDialog(message="Network unreachable", on_dismiss=recorder.callback("dismiss"))

    def test_retry_dialog_keeps_display_defaults(self, recorder: CallbackRecorder):
        dialog = RetryDialog(
            message="Network unreachable",
            on_dismiss=recorder.callback("dismiss"),
            on_retry=recorder.callback("retry"),
        )

        assert dialog.title_style == "headlineSmall"
        assert dialog.body_style == "bodyMedium"
        assert dialog.text_align == "start"
