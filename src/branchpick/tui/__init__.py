"""Interactive terminal picker for branchpick."""

from branchpick.tui.app import PickerApp
from branchpick.tui.state import PickerState, apply

__all__ = ["PickerApp", "PickerState", "apply"]
