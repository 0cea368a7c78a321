"""
Gaze event routing.

Every decoded tracking-service message passes through the GazeEventRouter,
which:
1. Re-synchronizes the host-owned settings (active feature, port)
2. Applies the lock policy
3. Dispatches gaze points and state messages to exactly one feature
4. Keeps message statistics

The host offers no change notifications for its settings, so they are polled
on every message. Replies may arrive after later messages have been handled
and are always compared against the context as it is when they arrive.
"""

import time
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from .utils.validation import ValidationUtils
from .context import SessionContext
from .errors import ProtocolError, StaleStateError
from .host_bridge import HostBridge, BridgeResult
from .models import (
    ActiveFeature, GazePoint, InboundMessage, SystemState,
    GAZE_POINT_MESSAGE, STATE_MESSAGE
)
from .privacy_shield import PrivacyShieldController
from .quick_tool import QuickToolController
from .screen_calibration import ScreenCalibration
from .xray import XRayController

logger = logging.getLogger(__name__)


@dataclass
class RouterStats:
    """Counters for the routing pipeline."""
    total_messages: int = 0
    gaze_points: int = 0
    state_messages: int = 0
    dropped_messages: int = 0
    ignored_while_locked: int = 0
    error_count: int = 0
    last_message_time: float = 0.0


class GazeEventRouter(QObject):
    """Demultiplexes tracking messages to the active feature controller."""

    feature_activated = pyqtSignal(object)  # ActiveFeature
    port_changed = pyqtSignal(int)
    processing_error = pyqtSignal(str)

    def __init__(self, context: SessionContext, bridge: HostBridge,
                 calibration: ScreenCalibration, quick_tool: QuickToolController,
                 xray: XRayController, privacy_shield: PrivacyShieldController):
        super().__init__()
        self.context = context
        self.bridge = bridge
        self.calibration = calibration
        self.quick_tool = quick_tool
        self.xray = xray
        self.privacy_shield = privacy_shield
        self.stats = RouterStats()

        self._controllers: Dict[ActiveFeature, QObject] = {
            ActiveFeature.QUICK_TOOL: quick_tool,
            ActiveFeature.XRAY: xray,
            ActiveFeature.PRIVACY_SHIELD: privacy_shield,
        }

        logger.info("GazeEventRouter initialized")

    def handle_message(self, payload: dict):
        """
        Process one decoded message from the tracking service.

        Never raises: malformed messages are dropped and unexpected errors are
        logged and counted, so one bad sample cannot stop the stream.

        Args:
            payload: JSON-decoded message object
        """
        self.stats.total_messages += 1
        self.stats.last_message_time = time.time()

        try:
            self.sync_host_settings()

            if self.context.locked:
                self.quick_tool.force_close()

            message = InboundMessage.from_payload(payload)
            if message.type == GAZE_POINT_MESSAGE:
                self._handle_gaze_point(message.data)
            elif message.type == STATE_MESSAGE:
                self._handle_state(message.data)
            else:
                self.stats.dropped_messages += 1
                logger.debug(f"Ignoring message of type {message.type!r}")

        except ProtocolError as e:
            self.stats.dropped_messages += 1
            logger.debug(f"Dropping malformed message: {e}")
        except Exception as e:
            self.stats.error_count += 1
            error_msg = f"Error processing message: {str(e)}"
            logger.error(error_msg, exc_info=True)
            self.processing_error.emit(error_msg)

    def sync_host_settings(self):
        """Poll the host for the active feature and the configured port."""
        self.bridge.get_active_feature(self._on_active_feature)
        self.bridge.get_port(self._on_port)

    def activate_feature(self, feature: ActiveFeature):
        """
        Make a feature the live one.

        The previous feature is stopped first so that its effect on the host
        (an open trigger window, an active privacy overlay) does not linger.
        """
        previous = self.context.active_feature
        if previous == feature:
            return
        if previous is not None:
            self._controllers[previous].stop()

        self.context.active_feature = feature
        self._controllers[feature].start()
        logger.info(f"Active feature: {feature.name}")
        self.feature_activated.emit(feature)

    def get_statistics(self) -> RouterStats:
        return self.stats

    # Dispatch ----------------------------------------------------------
    def _handle_gaze_point(self, data: dict):
        self.stats.gaze_points += 1
        if self.context.locked:
            self.stats.ignored_while_locked += 1
            return

        point = GazePoint.from_payload(data)
        feature = self.context.active_feature
        if feature == ActiveFeature.QUICK_TOOL:
            self.quick_tool.update(point.x, point.y)
        elif feature == ActiveFeature.XRAY:
            self.xray.update(point.x, point.y)

    def _handle_state(self, data: dict):
        self.stats.state_messages += 1
        state = SystemState.from_payload(data)

        self.calibration.calibrate(state)

        if self.context.accepts_gaze(ActiveFeature.PRIVACY_SHIELD):
            self.privacy_shield.update(state.is_looking, state.is_user_present)

    # Host replies ------------------------------------------------------
    def _on_active_feature(self, result: BridgeResult):
        try:
            feature = self._parse_reply(result, ActiveFeature.from_host, "active feature")
            if feature is not None and feature != self.context.active_feature:
                self.activate_feature(feature)
        except Exception as e:
            self.stats.error_count += 1
            logger.error(f"Error applying active feature reply: {e}", exc_info=True)

    def _on_port(self, result: BridgeResult):
        try:
            port = self._parse_reply(result, self._parse_port, "port")
            if port is not None and port != self.context.port:
                logger.info(f"Port changed: {self.context.port} -> {port}")
                self.context.port = port
                self.port_changed.emit(port)
        except Exception as e:
            self.stats.error_count += 1
            logger.error(f"Error applying port reply: {e}", exc_info=True)

    @staticmethod
    def _parse_port(value: str) -> int:
        ok, port = ValidationUtils.validate_port(value.strip(), "host port")
        if not ok:
            raise StaleStateError(f"Invalid port from host: {value!r}")
        return port

    def _parse_reply(self, result: BridgeResult, parser, name: str) -> Optional[object]:
        try:
            if result.is_empty:
                raise StaleStateError(result.error or f"empty {name} reply")
            return parser(result.value)
        except StaleStateError as e:
            logger.debug(f"Keeping {name}: {e}")
            return None
