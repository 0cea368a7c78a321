"""
Privacy Shield: dims the art board when the user looks away and blocks it
completely when the user leaves.
"""

import logging

from PyQt6.QtCore import QObject, pyqtSignal

from .host_bridge import HostBridge
from .models import PrivacyState

logger = logging.getLogger(__name__)


class PrivacyShieldController(QObject):
    """
    Normal / ScreenDimmed / FullyShielded state machine.

    Rules are evaluated in priority order on every update:
    absence shields fully, looking away dims, looking back restores.
    Each host command is sent once per state entry.
    """

    state_changed = pyqtSignal(object)  # PrivacyState

    def __init__(self, bridge: HostBridge):
        super().__init__()
        self.bridge = bridge
        self.state = PrivacyState.NORMAL

        logger.info("PrivacyShieldController initialized")

    def start(self):
        logger.info("Privacy Shield started")

    def stop(self):
        """Lift any active privacy overlay when the feature is switched away."""
        if self.state is not PrivacyState.NORMAL:
            self.bridge.deactivate_privacy()
            self._set_state(PrivacyState.NORMAL)

    def update(self, is_looking: bool, is_user_present: bool):
        """
        Apply one tracking-state observation.

        Args:
            is_looking: Whether the tracker currently follows the user's gaze
            is_user_present: Whether a user is in front of the screen
        """
        if not is_user_present:
            if self.state is not PrivacyState.FULLY_SHIELDED:
                logger.info("Activating privacy shield")
                self.bridge.activate_privacy_shield()
                self._set_state(PrivacyState.FULLY_SHIELDED)
            return

        if not is_looking:
            if self.state is PrivacyState.NORMAL:
                logger.info("Activating privacy screen")
                self.bridge.activate_privacy_screen()
                self._set_state(PrivacyState.SCREEN_DIMMED)
            return

        if self.state is not PrivacyState.NORMAL:
            logger.info("Turning off privacy")
            self.bridge.deactivate_privacy()
            self._set_state(PrivacyState.NORMAL)

    def _set_state(self, state: PrivacyState):
        self.state = state
        self.state_changed.emit(state)
