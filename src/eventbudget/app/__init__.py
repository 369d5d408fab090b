"""Application layer: workspace, autosave and change reconciliation."""

from eventbudget.app.autosave import AUTOSAVE_DELAY_SECONDS, Debouncer
from eventbudget.app.workspace import ProjectWorkspace, SaveState, SaveStatus

__all__ = [
    "AUTOSAVE_DELAY_SECONDS",
    "Debouncer",
    "ProjectWorkspace",
    "SaveState",
    "SaveStatus",
]
