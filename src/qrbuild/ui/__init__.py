from .error_dialog import (
    DialogButton, DialogState, NoDialog, RetryDialog, SimpleDialog, render_error_dialog
)

__all__ = [
    'DialogButton', 'DialogState', 'NoDialog', 'RetryDialog', 'SimpleDialog',
    'render_error_dialog'
]
