"""
Session context shared by the router and the feature controllers.

The host owns the active feature and the port; the context only mirrors them
and is re-synchronized on every inbound message. Lock state is owned by the
panel itself.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .config import DEFAULT_PORT
from .models import ActiveFeature, ScreenDimensions, TriggerRegion

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    """Process-wide panel state, passed explicitly to every component."""
    port: int = DEFAULT_PORT
    active_feature: Optional[ActiveFeature] = None
    locked: bool = False
    screen: ScreenDimensions = field(default_factory=ScreenDimensions)
    trigger_region: TriggerRegion = field(default_factory=TriggerRegion)

    def accepts_gaze(self, feature: ActiveFeature) -> bool:
        """True if gaze-driven input should reach the given feature."""
        return not self.locked and self.active_feature == feature
