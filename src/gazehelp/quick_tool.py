"""
QuickTool: a gaze-triggered tool picker.

Looking at the trigger region opens a trigger window in the host; the host
turns it into a tool popup once the user dwells on it. The popup position
follows the gaze vertically while it is alive.

Eye trackers systematically over- and undershoot at the physical screen
edges, so a trigger region that is flush with an edge also accepts samples
reported slightly beyond that edge.
"""

import logging

from PyQt6.QtCore import QObject, pyqtSignal

from .context import SessionContext
from .errors import StaleStateError
from .host_bridge import HostBridge, BridgeResult
from .models import QuickToolStatus, ScreenDimensions, TriggerRegion

logger = logging.getLogger(__name__)


def _axis_accepts(value: float, start: float, end: float,
                  near_flush: bool, far_flush: bool) -> bool:
    """Whether a coordinate is acceptable on one axis of an edge-tolerant hit test."""
    if far_flush and value > start:
        return True
    if near_flush and value < end:
        return True
    return start < value < end


def is_gaze_on_trigger(x: float, y: float, region: TriggerRegion,
                       screen: ScreenDimensions) -> bool:
    """
    Hit-test a gaze sample against the trigger region.

    A point strictly inside the region always hits. For a region flush with
    one or more screen edges, a point beyond that edge also hits as long as it
    lies within the region's span on the other axis.

    Args:
        x, y: Gaze coordinates in screen pixels
        region: Current trigger region
        screen: Calibrated screen geometry

    Returns:
        True if the sample should trigger the QuickTool
    """
    if region.contains(x, y):
        return True

    left_flush = region.x <= 0
    right_flush = region.right >= screen.width
    top_flush = region.y <= 0
    bottom_flush = region.bottom >= screen.height
    if not (left_flush or right_flush or top_flush or bottom_flush):
        return False

    return (_axis_accepts(x, region.x, region.right, left_flush, right_flush) and
            _axis_accepts(y, region.y, region.bottom, top_flush, bottom_flush))


class QuickToolController(QObject):
    """
    Dwell trigger state machine: Closed -> Triggered -> Open.

    Open is only entered when the host reports it; an open popup survives the
    gaze leaving the region so that a glance away does not dismiss it.
    """

    highlight_changed = pyqtSignal(bool)
    status_changed = pyqtSignal(object)  # QuickToolStatus

    def __init__(self, context: SessionContext, bridge: HostBridge):
        super().__init__()
        self.context = context
        self.bridge = bridge
        self.status = QuickToolStatus.CLOSED
        self.highlighted = False
        # Bumped on every local status change; status replies carrying an
        # older generation are dropped.
        self._generation = 0

        logger.info("QuickToolController initialized")

    @property
    def is_triggered(self) -> bool:
        return self.status is not QuickToolStatus.CLOSED

    def start(self):
        """Reset to the idle state when the feature becomes active."""
        self._generation += 1
        self._set_status(QuickToolStatus.CLOSED)
        self._set_highlight(False)
        logger.info("QuickTool started")

    def stop(self):
        """Cancel any open trigger when the feature is switched away."""
        self.force_close()
        self._set_highlight(False)

    def force_close(self):
        """Close the trigger window if one is open."""
        self._generation += 1
        if self.is_triggered:
            logger.info("Force-closing QuickTool trigger")
            self.bridge.close_trigger()
            self._set_status(QuickToolStatus.CLOSED)

    def update(self, x: float, y: float):
        """
        Process one gaze sample.

        Args:
            x, y: Gaze coordinates in screen pixels
        """
        if not self.context.screen.is_set:
            logger.debug("QuickTool sample ignored: screen not calibrated")
            return

        self.refresh_trigger_region()

        if is_gaze_on_trigger(x, y, self.context.trigger_region, self.context.screen):
            self._start_trigger()
        elif self.status is not QuickToolStatus.OPEN:
            self._stop_trigger()

        if self.is_triggered:
            self.bridge.update_popup(y)
            self._poll_status()

    def refresh_trigger_region(self):
        """Re-read the trigger region; the host has no event for settings changes."""
        self.bridge.get_trigger_loc(self._on_trigger_loc)

    # Internal ----------------------------------------------------------
    def _start_trigger(self):
        self._set_highlight(True)
        if not self.is_triggered:
            logger.debug("Gaze on trigger region, opening trigger")
            self._generation += 1
            self.bridge.open_trigger()
            self._set_status(QuickToolStatus.TRIGGERED)

    def _stop_trigger(self):
        self._set_highlight(False)
        if self.is_triggered:
            logger.debug("Gaze left trigger region, closing trigger")
            self._generation += 1
            self.bridge.close_trigger()
            self._set_status(QuickToolStatus.CLOSED)

    def _poll_status(self):
        generation = self._generation
        self.bridge.get_status(lambda result: self._on_status(generation, result))

    def _on_trigger_loc(self, result: BridgeResult):
        try:
            if not result.ok:
                raise StaleStateError(result.error or "getTriggerLoc failed")
            self.context.trigger_region = TriggerRegion.from_host_string(
                result.value, self.context.screen.scale_factor)
        except StaleStateError as e:
            logger.debug(f"Keeping trigger region: {e}")

    def _on_status(self, generation: int, result: BridgeResult):
        if generation != self._generation:
            logger.debug("Dropping stale QuickTool status reply")
            return
        try:
            if not result.ok:
                raise StaleStateError(result.error or "getStatus failed")
            status = QuickToolStatus.from_host(result.value)
        except StaleStateError as e:
            logger.debug(f"QuickTool status unchanged: {e}")
            return

        if status is QuickToolStatus.CLOSED and self.is_triggered:
            self._set_highlight(False)
        self._set_status(status)

    def _set_status(self, status: QuickToolStatus):
        if status is not self.status:
            logger.info(f"QuickTool status: {self.status.value} -> {status.value}")
            self.status = status
            self.status_changed.emit(status)

    def _set_highlight(self, highlighted: bool):
        if highlighted != self.highlighted:
            self.highlighted = highlighted
            self.highlight_changed.emit(highlighted)
