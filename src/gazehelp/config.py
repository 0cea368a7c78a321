"""
GazeHelp Panel Configuration Module
Contains all configuration constants, trigger presets, and connection settings.
"""

from dataclasses import dataclass, field
from typing import Dict, Any

# Application constants
APP_NAME = "GazeHelp"
APP_VERSION = "1.0.0"

# GazeHelpServer connection
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8898
MIN_PORT = 1
MAX_PORT = 65535

# The tracking service and the host canvas disagree on display density;
# host-reported geometry is multiplied by this factor.
SCREEN_SCALE_FACTOR = 1.5

# Trigger window sizes, in unscaled host units
TRIGGER_SIZES = {
    'small': {
        'title': 'Small',
        'width': 200,
        'height': 120,
    },
    'medium': {
        'title': 'Medium',
        'width': 300,
        'height': 180,
    },
    'large': {
        'title': 'Large',
        'width': 400,
        'height': 220,
    },
}
DEFAULT_TRIGGER_SIZE = 'medium'

# Feature indices as reported by the host settings panel
QUICK_TOOL = 0
XRAY = 1
PRIVACY_SHIELD = 2
DEFAULT_FEATURE = XRAY

XRAY_CONFIG = {
    'throttle_ms': 300,  # minimum gap between crosshair updates sent to the host
    'default_diameter': 200,  # px
    'min_diameter': 1,
    'max_diameter': 1000,
}

# Tracking service wire values
GAZE_TRACKED = "GazeTracked"
USER_PRESENT = "Present"

# Banner texts shown by the panel
CONNECTION_MESSAGES = {
    'connecting': "Connecting to server...",
    'disconnected': "Not connected to GazeHelpServer.",
    'error': "Error: {message}",
}

# Logging
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = 'gazehelp_errors.log'


@dataclass
class PanelSettings:
    """Runtime settings for a panel session"""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    default_feature: int = DEFAULT_FEATURE
    scale_factor: float = SCREEN_SCALE_FACTOR
    trigger_size: str = DEFAULT_TRIGGER_SIZE
    xray: Dict[str, Any] = field(default_factory=lambda: dict(XRAY_CONFIG))

    @property
    def xray_throttle_ms(self) -> int:
        return int(self.xray.get('throttle_ms', XRAY_CONFIG['throttle_ms']))
