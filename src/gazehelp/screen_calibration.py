"""
One-time screen calibration.

The first state message from the tracking service carries the screen bounds.
From them the panel derives absolute screen geometry and a default QuickTool
trigger region in the bottom-right corner, and tells the host about it.
"""

import logging

from .config import SCREEN_SCALE_FACTOR
from .context import SessionContext
from .host_bridge import HostBridge
from .models import SystemState, TriggerRegion, TriggerSizePreset

logger = logging.getLogger(__name__)


class ScreenCalibration:
    """Derives ScreenDimensions and the default TriggerRegion exactly once."""

    def __init__(self, context: SessionContext, bridge: HostBridge,
                 preset: TriggerSizePreset = TriggerSizePreset.MEDIUM,
                 scale_factor: float = SCREEN_SCALE_FACTOR):
        self.context = context
        self.bridge = bridge
        self.preset = preset
        self.scale_factor = scale_factor

    @property
    def is_set(self) -> bool:
        return self.context.screen.is_set

    def calibrate(self, state: SystemState) -> bool:
        """
        Seed screen geometry from a state message.

        Args:
            state: Parsed state message

        Returns:
            True if this call performed the calibration, False if it was
            already done or the message carried no screen bounds
        """
        if self.is_set:
            return False
        if state.screen_bounds is None:
            logger.debug("State message without screen bounds; calibration pending")
            return False

        screen = self.context.screen
        screen.width = state.screen_bounds.width
        screen.height = state.screen_bounds.height
        screen.scale_factor = self.scale_factor

        width = self.preset.width * self.scale_factor
        height = self.preset.height * self.scale_factor
        self.context.trigger_region = TriggerRegion(
            x=screen.width - width,
            y=screen.height - height,
            width=width,
            height=height,
        )

        self.bridge.set_screen_dimensions(screen.width, screen.height, screen.scale_factor)
        screen.is_set = True

        logger.info(f"Screen calibrated: {screen.width:g}x{screen.height:g} "
                    f"(scale {screen.scale_factor:g}), trigger at "
                    f"({self.context.trigger_region.x:g}, {self.context.trigger_region.y:g})")
        return True
