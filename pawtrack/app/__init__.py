"""
PawTrack - App Module
Home screen state, controller, and service wiring.
"""

from pawtrack.app.state import ViewState
from pawtrack.app.controller import HomeController

__all__ = [
    "ViewState",
    "HomeController",
]
