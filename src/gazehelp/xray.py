"""
X-Ray: a gaze-positioned see-through window onto an underlying layer.

The user presses and holds the panel button; while held, crosshairs in the
host follow the gaze. Releasing the button places the X-Ray circle there.
Crosshair updates are paced by a timer gate so the host is not flooded at
the tracker's sample rate.
"""

import logging
from enum import Enum

from PyQt6.QtCore import QObject, QTimer, Qt, pyqtSignal

from .config import XRAY_CONFIG
from .utils.validation import ValidationUtils
from .host_bridge import HostBridge

logger = logging.getLogger(__name__)


class XRayState(Enum):
    IDLE = "idle"
    ARMING = "arming"
    ACTIVE = "active"


class XRayController(QObject):
    """Button-armed, throttled relay of gaze coordinates to the host crosshairs."""

    state_changed = pyqtSignal(object)  # XRayState
    diameter_changed = pyqtSignal(int)

    def __init__(self, bridge: HostBridge, throttle_ms: int = XRAY_CONFIG['throttle_ms'],
                 diameter: int = XRAY_CONFIG['default_diameter']):
        super().__init__()
        self.bridge = bridge
        self.state = XRayState.IDLE
        self.diameter = int(diameter)
        self.min_diameter = int(XRAY_CONFIG['min_diameter'])
        self.max_diameter = int(XRAY_CONFIG['max_diameter'])

        # Gate: open when a crosshair update may be sent
        self._gate_open = True
        self._gate_timer = QTimer(self)
        self._gate_timer.setSingleShot(True)
        self._gate_timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._gate_timer.setInterval(int(throttle_ms))
        self._gate_timer.timeout.connect(self._open_gate)

        logger.info(f"XRayController initialized (throttle {throttle_ms}ms, diameter {self.diameter}px)")

    @property
    def throttle_ms(self) -> int:
        return self._gate_timer.interval()

    @property
    def is_arming(self) -> bool:
        return self.state is XRayState.ARMING

    def start(self):
        """Announce the current diameter so the panel controls can render it."""
        self.diameter_changed.emit(self.diameter)
        logger.info("X-Ray started")

    def stop(self):
        """Stop relaying gaze when the feature is switched away."""
        if self.is_arming:
            logger.info("X-Ray disarmed by feature switch")
            self._set_state(XRayState.IDLE)

    def press(self):
        """Trigger button pressed: show crosshairs and start following the gaze."""
        self.bridge.start_crosshairs()
        self._set_state(XRayState.ARMING)

    def release(self):
        """
        Trigger button released: place the X-Ray circle at the crosshairs.

        The host is always told to activate, even without a preceding press;
        it places the circle at the last crosshair position it knows.
        """
        if not self.is_arming:
            logger.debug("X-Ray release without press")
        self._set_state(XRayState.ACTIVE)
        self.bridge.activate_xray()

    def clear(self):
        """Remove the X-Ray overlay, whatever the current state."""
        self.bridge.clear_xray()
        self._set_state(XRayState.IDLE)

    def update(self, x: float, y: float):
        """
        Relay a gaze sample to the crosshairs if armed and the gate is open.

        Args:
            x, y: Gaze coordinates in screen pixels
        """
        if not self.is_arming or not self._gate_open:
            return
        self.bridge.update_crosshairs(x, y)
        self._gate_open = False
        self._gate_timer.start()

    def set_diameter(self, value) -> bool:
        """
        Update the local diameter while the size control is being dragged.

        Args:
            value: New diameter in pixels

        Returns:
            True if the value was accepted
        """
        ok, diameter = ValidationUtils.validate_integer_range(
            value, self.min_diameter, self.max_diameter, "diameter", "X-Ray")
        if not ok:
            return False
        if diameter != self.diameter:
            self.diameter = diameter
            self.diameter_changed.emit(diameter)
        return True

    def commit_diameter(self):
        """Push the diameter to the host once the size control is released."""
        self.bridge.update_diameter(self.diameter)
        logger.info(f"X-Ray diameter committed: {self.diameter}px")

    def _open_gate(self):
        self._gate_open = True

    def _set_state(self, state: XRayState):
        if state is not self.state:
            logger.info(f"X-Ray state: {self.state.value} -> {state.value}")
            self.state = state
            self.state_changed.emit(state)
