"""
Data model for the GazeHelp control core.

Covers the values carried by inbound tracking messages (gaze points and
system state), the screen geometry derived from them, and the small state
enums shared between the feature controllers and the host bridge.
"""

import math
import logging
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Dict, Optional

from .config import GAZE_TRACKED, USER_PRESENT, SCREEN_SCALE_FACTOR, TRIGGER_SIZES
from .errors import ProtocolError, StaleStateError

logger = logging.getLogger(__name__)

GAZE_POINT_MESSAGE = "gazePoint"
STATE_MESSAGE = "state"


class ActiveFeature(IntEnum):
    """Assistive features, numbered as the host settings panel reports them."""
    QUICK_TOOL = 0
    XRAY = 1
    PRIVACY_SHIELD = 2

    @classmethod
    def from_host(cls, value: str) -> "ActiveFeature":
        """
        Parse the host's getActiveFeature() reply.

        Raises:
            StaleStateError: if the reply is empty, not an integer or not a known feature
        """
        try:
            return cls(int(str(value).strip()))
        except (TypeError, ValueError):
            raise StaleStateError(f"Unknown active feature: {value!r}")


class TriggerSizePreset(Enum):
    """Trigger window size presets, in unscaled host units."""
    SMALL = 'small'
    MEDIUM = 'medium'
    LARGE = 'large'

    @property
    def title(self) -> str:
        return TRIGGER_SIZES[self.value]['title']

    @property
    def width(self) -> float:
        return float(TRIGGER_SIZES[self.value]['width'])

    @property
    def height(self) -> float:
        return float(TRIGGER_SIZES[self.value]['height'])


class QuickToolStatus(Enum):
    """Lifecycle of the host's QuickTool popup."""
    CLOSED = "closed"
    TRIGGERED = "triggered"
    OPEN = "open"

    @classmethod
    def from_host(cls, value: str) -> "QuickToolStatus":
        try:
            return cls(str(value).strip())
        except ValueError:
            raise StaleStateError(f"Unknown QuickTool status: {value!r}")


class PrivacyState(Enum):
    NORMAL = "normal"
    SCREEN_DIMMED = "screen_dimmed"
    FULLY_SHIELDED = "fully_shielded"


class GazeTracking(Enum):
    TRACKED = "tracked"
    LOST = "lost"


class UserPresence(Enum):
    PRESENT = "present"
    ABSENT = "absent"


@dataclass
class GazePoint:
    """A single on-screen gaze observation."""
    x: float
    y: float

    @classmethod
    def from_payload(cls, data: Any) -> "GazePoint":
        """
        Build a gaze point from a gazePoint message's data block.

        The tracking service sends coordinates as numeric strings, e.g.
        ``{"X": "812.5", "Y": "400"}``.

        Raises:
            ProtocolError: if either coordinate is missing or not a finite number
        """
        if not isinstance(data, dict):
            raise ProtocolError(f"gazePoint data is not an object: {data!r}")
        try:
            x = float(data['X'])
            y = float(data['Y'])
        except KeyError as e:
            raise ProtocolError(f"gazePoint missing coordinate {e}")
        except (TypeError, ValueError) as e:
            raise ProtocolError(f"gazePoint coordinate not numeric: {e}")
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ProtocolError(f"gazePoint coordinate not finite: ({x}, {y})")
        return cls(x=x, y=y)


@dataclass
class ScreenBounds:
    width: float
    height: float


@dataclass
class SystemState:
    """Payload of a state message from the tracking service."""
    gaze_tracking: GazeTracking
    user_presence: UserPresence
    screen_bounds: Optional[ScreenBounds] = None

    @property
    def is_looking(self) -> bool:
        return self.gaze_tracking is GazeTracking.TRACKED

    @property
    def is_user_present(self) -> bool:
        return self.user_presence is UserPresence.PRESENT

    @classmethod
    def from_payload(cls, data: Any) -> "SystemState":
        """
        Build a system state from a state message's data block.

        Any gazeTracking value other than "GazeTracked" counts as lost and any
        userPresence other than "Present" counts as absent. screenBounds is
        optional; a missing or unusable block leaves ``screen_bounds`` as None.

        Raises:
            ProtocolError: if the tracking or presence field is missing
        """
        if not isinstance(data, dict):
            raise ProtocolError(f"state data is not an object: {data!r}")
        if 'gazeTracking' not in data or 'userPresence' not in data:
            raise ProtocolError("state message missing gazeTracking/userPresence")

        tracking = GazeTracking.TRACKED if data['gazeTracking'] == GAZE_TRACKED else GazeTracking.LOST
        presence = UserPresence.PRESENT if data['userPresence'] == USER_PRESENT else UserPresence.ABSENT

        bounds = None
        raw_bounds = data.get('screenBounds')
        if isinstance(raw_bounds, dict):
            try:
                bounds = ScreenBounds(width=float(raw_bounds['Width']),
                                      height=float(raw_bounds['Height']))
            except (KeyError, TypeError, ValueError) as e:
                logger.debug(f"Ignoring unusable screenBounds {raw_bounds!r}: {e}")

        return cls(gaze_tracking=tracking, user_presence=presence, screen_bounds=bounds)


@dataclass
class ScreenDimensions:
    """Absolute screen geometry, set once from the first state message."""
    width: float = 0.0
    height: float = 0.0
    scale_factor: float = SCREEN_SCALE_FACTOR
    is_set: bool = False


@dataclass
class TriggerRegion:
    """Rectangular QuickTool hot-zone in screen coordinates."""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, x: float, y: float) -> bool:
        """Strict containment; points on the border are outside."""
        return self.x < x < self.right and self.y < y < self.bottom

    @classmethod
    def from_host_string(cls, text: str, scale_factor: float) -> "TriggerRegion":
        """
        Parse the host's getTriggerLoc() reply.

        The host reports "x,y,width,height" with the position already in screen
        coordinates and the size in unscaled units.

        Args:
            text: Raw reply string
            scale_factor: Screen scale factor applied to width and height

        Raises:
            StaleStateError: if the reply is empty or malformed
        """
        if not text or not str(text).strip():
            raise StaleStateError("Trigger location not available yet")
        parts = str(text).split(',')
        if len(parts) != 4:
            raise StaleStateError(f"Malformed trigger location: {text!r}")
        try:
            x, y, width, height = (float(p) for p in parts)
        except ValueError:
            raise StaleStateError(f"Malformed trigger location: {text!r}")
        if not all(math.isfinite(v) for v in (x, y, width, height)):
            raise StaleStateError(f"Malformed trigger location: {text!r}")
        return cls(x=x, y=y, width=width * scale_factor, height=height * scale_factor)


@dataclass
class InboundMessage:
    """A decoded tracking-service message: its type tag and data block."""
    type: str
    data: Dict[str, Any]

    @classmethod
    def from_payload(cls, payload: Any) -> "InboundMessage":
        if not isinstance(payload, dict):
            raise ProtocolError(f"Message is not an object: {payload!r}")
        msg_type = payload.get('type')
        if not isinstance(msg_type, str):
            raise ProtocolError(f"Message has no type: {payload!r}")
        data = payload.get('data')
        return cls(type=msg_type, data=data if isinstance(data, dict) else {})
