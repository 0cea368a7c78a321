"""
Bridge into the host application's scripting environment.

The host evaluates named operations with string arguments and answers with a
string. Queries are asynchronous: the answer is delivered to a callback as a
BridgeResult, possibly on a later turn of the Qt event loop, so callers must
not assume the session context is unchanged when the callback runs.

This module provides the HostBridge interface used by the control core and a
MockHostBridge that simulates the host for standalone runs and testing.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from PyQt6.QtCore import QTimer

from .config import DEFAULT_PORT, DEFAULT_FEATURE

logger = logging.getLogger(__name__)

QUERY_OPERATIONS = frozenset({
    "getTriggerLoc", "getStatus", "getActiveFeature", "getPort",
})


@dataclass
class BridgeResult:
    """Outcome of a host query: either a string value or a failure reason."""
    ok: bool
    value: str = ""
    error: Optional[str] = None

    @classmethod
    def success(cls, value) -> "BridgeResult":
        return cls(ok=True, value="" if value is None else str(value))

    @classmethod
    def failure(cls, reason: str) -> "BridgeResult":
        return cls(ok=False, error=reason)

    @property
    def is_empty(self) -> bool:
        return not self.ok or not self.value.strip()


BridgeCallback = Callable[[BridgeResult], None]


def format_arg(value) -> str:
    """Render an argument the way the host script expects it (1920.0 -> "1920")."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class HostBridge:
    """
    Request/response channel into the host.

    Subclasses implement evaluate(); the named helpers below cover every
    operation the control core needs.
    """

    def evaluate(self, operation: str, args: Sequence = (),
                 callback: Optional[BridgeCallback] = None):
        """
        Evaluate a host operation.

        Args:
            operation: Host function name, e.g. "getStatus"
            args: Positional arguments, passed to the host as strings
            callback: Receives the BridgeResult; None for fire-and-forget
        """
        raise NotImplementedError

    def fire(self, operation: str, *args):
        """Send a command without waiting for an answer."""
        self.evaluate(operation, args, None)

    # Screen / QuickTool -------------------------------------------------
    def set_screen_dimensions(self, width: float, height: float, scale_factor: float):
        self.fire("setScreenDimensions", width, height, scale_factor)

    def get_trigger_loc(self, callback: BridgeCallback):
        self.evaluate("getTriggerLoc", (), callback)

    def open_trigger(self):
        self.fire("openTrigger")

    def close_trigger(self):
        self.fire("closeTrigger")

    def get_status(self, callback: BridgeCallback):
        self.evaluate("getStatus", (), callback)

    def update_popup(self, y: float):
        self.fire("updatePopup", y)

    # X-Ray --------------------------------------------------------------
    def start_crosshairs(self):
        self.fire("startCrosshairs")

    def update_crosshairs(self, x: float, y: float):
        self.fire("updateCrosshairs", x, y)

    def activate_xray(self):
        self.fire("activateXray")

    def update_diameter(self, diameter: int):
        self.fire("updateDiameter", diameter)

    def clear_xray(self):
        self.fire("clearXray")

    # Privacy Shield -----------------------------------------------------
    def activate_privacy_shield(self):
        self.fire("activatePrivacyShield")

    def activate_privacy_screen(self):
        self.fire("activatePrivacyScreen")

    def deactivate_privacy(self):
        self.fire("deactivatePrivacy")

    # Settings -----------------------------------------------------------
    def get_active_feature(self, callback: BridgeCallback):
        self.evaluate("getActiveFeature", (), callback)

    def get_port(self, callback: BridgeCallback):
        self.evaluate("getPort", (), callback)

    def open_settings(self):
        self.fire("openSettings")


class MockHostBridge(HostBridge):
    """
    In-process stand-in for the host application.

    Keeps the host-side settings (active feature, port, trigger location,
    popup status) as plain attributes and records every call. Replies are
    delivered synchronously by default; with ``deferred=True`` they arrive on
    the next event loop turn, as they would from a real host.
    """

    def __init__(self, deferred: bool = False):
        self.deferred = deferred
        self.active_feature = DEFAULT_FEATURE
        self.port = DEFAULT_PORT
        self.trigger_loc = ""
        self.status = "closed"
        self.screen: Optional[Tuple[str, str, str]] = None
        self.diameter: Optional[str] = None
        self.failing_operations = set()
        self.calls: List[Tuple[str, Tuple[str, ...]]] = []

        logger.info("MockHostBridge initialized")

    @property
    def commands(self) -> List[Tuple[str, Tuple[str, ...]]]:
        """Recorded fire-and-forget commands, in order."""
        return [call for call in self.calls if call[0] not in QUERY_OPERATIONS]

    def command_names(self) -> List[str]:
        return [name for name, _ in self.commands]

    def count(self, operation: str) -> int:
        return sum(1 for name, _ in self.calls if name == operation)

    def clear(self):
        self.calls.clear()

    def evaluate(self, operation: str, args: Sequence = (),
                 callback: Optional[BridgeCallback] = None):
        str_args = tuple(format_arg(a) for a in args)
        self.calls.append((operation, str_args))
        logger.debug(f"Host call: {operation}({', '.join(str_args)})")

        if operation in self.failing_operations:
            result = BridgeResult.failure(f"{operation} failed")
        else:
            result = self._apply(operation, str_args)

        if callback is None:
            return
        if self.deferred:
            QTimer.singleShot(0, lambda: callback(result))
        else:
            callback(result)

    def _apply(self, operation: str, args: Tuple[str, ...]) -> BridgeResult:
        if operation == "getActiveFeature":
            return BridgeResult.success(self.active_feature)
        if operation == "getPort":
            return BridgeResult.success(self.port)
        if operation == "getTriggerLoc":
            return BridgeResult.success(self.trigger_loc)
        if operation == "getStatus":
            return BridgeResult.success(self.status)
        if operation == "setScreenDimensions":
            self.screen = args
        elif operation == "openTrigger":
            self.status = "triggered"
        elif operation == "closeTrigger":
            self.status = "closed"
        elif operation == "updateDiameter":
            self.diameter = args[0] if args else None
        return BridgeResult.success("")
