from .signal import Signal, ObservableProperty
from .base import BaseViewModel
from .view_controller import CommandResult, ViewController, ViewSnapshot

__all__ = [
    "BaseViewModel",
    "CommandResult",
    "ObservableProperty",
    "Signal",
    "ViewController",
    "ViewSnapshot",
]
