"""
GazeHelp panel session.

Builds the control core around a HostBridge and wires the pieces together:
tracking messages flow from the ConnectionManager into the GazeEventRouter,
and port changes reported by the host flow back into the ConnectionManager.
The panel buttons (lock, settings, retry, X-Ray controls) are exposed as
plain methods so any front end can drive them.
"""

import logging
from typing import Callable, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from .config import PanelSettings, XRAY_CONFIG
from .connection_manager import ConnectionManager
from .context import SessionContext
from .event_router import GazeEventRouter
from .host_bridge import HostBridge
from .models import ActiveFeature, TriggerSizePreset
from .privacy_shield import PrivacyShieldController
from .quick_tool import QuickToolController
from .screen_calibration import ScreenCalibration
from .xray import XRayController

logger = logging.getLogger(__name__)


class GazeHelpSession(QObject):
    """Owns one panel's control core for the lifetime of the panel."""

    lock_changed = pyqtSignal(bool)

    def __init__(self, settings: PanelSettings, bridge: HostBridge,
                 socket_factory: Optional[Callable[[], QObject]] = None):
        """
        Initialize the session.

        Args:
            settings: Panel settings (host, initial port, presets)
            bridge: Channel into the host application
            socket_factory: Optional WebSocket factory, mainly for tests
        """
        super().__init__()
        self.settings = settings
        self.bridge = bridge
        self.context = SessionContext(port=settings.port)
        self.context.screen.scale_factor = settings.scale_factor

        self.calibration = ScreenCalibration(
            self.context, bridge,
            preset=TriggerSizePreset(settings.trigger_size),
            scale_factor=settings.scale_factor)
        self.quick_tool = QuickToolController(self.context, bridge)
        self.xray = XRayController(
            bridge,
            throttle_ms=settings.xray_throttle_ms,
            diameter=settings.xray.get('default_diameter', XRAY_CONFIG['default_diameter']))
        self.privacy_shield = PrivacyShieldController(bridge)
        self.router = GazeEventRouter(
            self.context, bridge, self.calibration,
            self.quick_tool, self.xray, self.privacy_shield)
        self.connection = ConnectionManager(
            self.context, host=settings.host, socket_factory=socket_factory)

        self.connection.message_received.connect(self.router.handle_message)
        self.router.port_changed.connect(self.connection.apply_port)

        logger.info("GazeHelpSession initialized")

    @property
    def is_locked(self) -> bool:
        return self.context.locked

    def start(self):
        """Activate the default feature and connect to the tracking service."""
        self.router.activate_feature(ActiveFeature(self.settings.default_feature))
        self.connection.connect_to(self.context.port)

    def stop(self):
        """Close the tracking connection."""
        self.connection.close()
        logger.info("GazeHelpSession stopped")

    # Panel controls ----------------------------------------------------
    def toggle_lock(self) -> bool:
        """Flip the lock state; returns the new state."""
        self.set_locked(not self.context.locked)
        return self.context.locked

    def set_locked(self, locked: bool):
        """
        Lock or unlock gaze input.

        While locked, gaze samples are ignored and an open QuickTool trigger is
        closed on the next message.
        """
        locked = bool(locked)
        if locked == self.context.locked:
            return
        self.context.locked = locked
        logger.info(f"Gaze input {'locked' if locked else 'unlocked'}")
        self.lock_changed.emit(locked)

    def open_settings(self):
        """Open the host settings dialog, closing any QuickTool trigger first."""
        self.quick_tool.force_close()
        self.bridge.open_settings()

    def retry(self):
        """User-initiated reconnect on the current port."""
        self.connection.reconnect()

    # X-Ray controls ----------------------------------------------------
    def press_xray(self):
        self.xray.press()

    def release_xray(self):
        self.xray.release()

    def clear_xray(self):
        self.xray.clear()

    def set_xray_diameter(self, value) -> bool:
        return self.xray.set_diameter(value)

    def commit_xray_diameter(self):
        self.xray.commit_diameter()
