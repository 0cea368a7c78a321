"""
GazeHelp control core.
Connects a gaze tracking service to a host creative application and drives
the QuickTool, X-Ray and Privacy Shield assistive features.
"""

from .errors import GazeHelpError, ConnectivityError, ProtocolError, StaleStateError
from .models import (
    ActiveFeature, TriggerSizePreset, QuickToolStatus, PrivacyState,
    GazePoint, SystemState, ScreenDimensions, TriggerRegion
)
from .context import SessionContext
from .host_bridge import HostBridge, MockHostBridge, BridgeResult
from .screen_calibration import ScreenCalibration
from .connection_manager import ConnectionManager, ConnectionState, ConnectionStatus
from .quick_tool import QuickToolController, is_gaze_on_trigger
from .xray import XRayController, XRayState
from .privacy_shield import PrivacyShieldController
from .event_router import GazeEventRouter, RouterStats
from .session import GazeHelpSession

__all__ = [
    # Errors
    'GazeHelpError', 'ConnectivityError', 'ProtocolError', 'StaleStateError',
    # Data model
    'ActiveFeature', 'TriggerSizePreset', 'QuickToolStatus', 'PrivacyState',
    'GazePoint', 'SystemState', 'ScreenDimensions', 'TriggerRegion',
    'SessionContext',
    # Host bridge
    'HostBridge', 'MockHostBridge', 'BridgeResult',
    # Components
    'ScreenCalibration', 'ConnectionManager', 'ConnectionState', 'ConnectionStatus',
    'QuickToolController', 'is_gaze_on_trigger', 'XRayController', 'XRayState',
    'PrivacyShieldController', 'GazeEventRouter', 'RouterStats',
    'GazeHelpSession'
]
