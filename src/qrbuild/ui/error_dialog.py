"""
Render model for the sample app's error dialog.

`render_error_dialog` is called on every render pass with the current error
message and callbacks. It returns one of three variants so hosts never have to
branch on whether a retry callback was supplied:

    NoDialog                      nothing is shown
    SimpleDialog(on_dismiss)      title, message and an "OK" button
    RetryDialog(on_dismiss, ...)  same, plus a "Retry" button

Nothing is stored between renders.
"""
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

Callback = Callable[[], None]

ERROR_TITLE = "Error"
CONFIRM_LABEL = "OK"
RETRY_LABEL = "Retry"


@dataclass(frozen=True)
class DialogButton:
    """A text button wired to a single callback."""
    label: str
    on_click: Callback

    def click(self) -> None:
        self.on_click()


@dataclass(frozen=True)
class NoDialog:
    visible = False

    @property
    def buttons(self) -> List[DialogButton]:
        return []


class _VisibleDialog:
    """Button wiring shared by the visible variants."""

    visible = True

    @property
    def confirm_button(self) -> DialogButton:
        return DialogButton(CONFIRM_LABEL, self.on_dismiss)

    @property
    def dismiss_button(self) -> Optional[DialogButton]:
        return None

    @property
    def buttons(self) -> List[DialogButton]:
        """Buttons in display order, secondary action first."""
        secondary = self.dismiss_button
        return [secondary, self.confirm_button] if secondary else [self.confirm_button]

    def request_dismiss(self) -> None:
        """Host-level dismissal such as tapping outside the dialog."""
        self.on_dismiss()

    def button(self, label: str) -> DialogButton:
        for candidate in self.buttons:
            if candidate.label == label:
                return candidate
        raise KeyError(label)


@dataclass(frozen=True)
class SimpleDialog(_VisibleDialog):
    message: str
    on_dismiss: Callback
    title: str = ERROR_TITLE
    title_style: str = "headlineSmall"
    body_style: str = "bodyMedium"
    text_align: str = "start"


@dataclass(frozen=True)
class RetryDialog(_VisibleDialog):
    message: str
    on_dismiss: Callback
    on_retry: Callback
    title: str = ERROR_TITLE
    title_style: str = "headlineSmall"
    body_style: str = "bodyMedium"
    text_align: str = "start"

    @property
    def dismiss_button(self) -> DialogButton:
        return DialogButton(RETRY_LABEL, self.on_retry)


DialogState = Union[NoDialog, SimpleDialog, RetryDialog]


def render_error_dialog(
    error: Optional[str],
    on_dismiss: Callback,
    on_retry: Optional[Callback] = None
) -> DialogState:
    """Describe the error dialog for the given inputs."""
    if error is None:
        return NoDialog()
    if on_retry is None:
        return SimpleDialog(message=error, on_dismiss=on_dismiss)
    return RetryDialog(message=error, on_dismiss=on_dismiss, on_retry=on_retry)
