"""
Connection to the GazeHelpServer tracking service.

Owns the WebSocket session lifecycle and the connectivity banner shown by the
panel. There is no automatic retry: a lost session waits for the user to hit
reconnect, and the only automatic reconnection happens when the host settings
switch to a different port.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from PyQt6.QtCore import QObject, QUrl, pyqtSignal
from PyQt6.QtWebSockets import QWebSocket

from .config import DEFAULT_HOST, CONNECTION_MESSAGES
from .utils.validation import ValidationUtils
from .context import SessionContext
from .errors import ConnectivityError, ProtocolError

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


@dataclass
class ConnectionStatus:
    """Connection state plus the error text when state is ERROR."""
    state: ConnectionState
    message: str = ""


class ConnectionManager(QObject):
    """
    WebSocket session to the tracking service.

    Each (re)connect builds a fresh socket; the previous one is detached before
    it is closed so its late signals cannot affect the new session.
    """

    status_changed = pyqtSignal(object)  # ConnectionStatus
    banner_changed = pyqtSignal(str)  # empty string hides the banner
    reconnect_available = pyqtSignal(bool)
    message_received = pyqtSignal(object)  # decoded message dict

    def __init__(self, context: SessionContext, host: str = DEFAULT_HOST,
                 socket_factory: Optional[Callable[[], QObject]] = None):
        """
        Initialize the connection manager.

        Args:
            context: Session context holding the configured port
            host: Tracking service host name
            socket_factory: Builds a new socket per session; defaults to QWebSocket
        """
        super().__init__()
        self.context = context
        self.host = host
        self._socket_factory = socket_factory or QWebSocket
        self._socket = None
        self._port: Optional[int] = None
        self.status = ConnectionStatus(ConnectionState.DISCONNECTED)
        self.banner = ""
        self.dropped_messages = 0

        logger.info("ConnectionManager initialized")

    @property
    def state(self) -> ConnectionState:
        return self.status.state

    @property
    def port(self) -> Optional[int]:
        """Port of the current session, or None before the first connect."""
        return self._port

    def connect_to(self, port: Optional[int] = None):
        """
        Open a new session, replacing any existing one.

        Args:
            port: Port to connect to; defaults to the context's port

        Raises:
            ConnectivityError: if the port is not a valid TCP port
        """
        if port is None:
            port = self.context.port
        ok, valid_port = ValidationUtils.validate_port(port, "connect")
        if not ok:
            raise ConnectivityError(f"Invalid port: {port!r}")

        self._teardown()
        self._port = valid_port
        self.context.port = valid_port

        socket = self._socket_factory()
        socket.connected.connect(self._on_connected)
        socket.disconnected.connect(self._on_disconnected)
        socket.textMessageReceived.connect(self._on_text_message)
        socket.errorOccurred.connect(self._on_error)
        self._socket = socket

        url = f"ws://{self.host}:{valid_port}"
        logger.info(f"Connecting to {url}")
        self._set_status(ConnectionState.CONNECTING, banner=CONNECTION_MESSAGES['connecting'])
        self.reconnect_available.emit(False)
        socket.open(QUrl(url))

    def reconnect(self):
        """User-initiated retry on the current port."""
        logger.info("Reconnect requested")
        self.connect_to(self.context.port)

    def apply_port(self, port: int):
        """
        Follow a port change from the host settings.

        Reconnects only when the port differs from the current session's port.
        """
        if port == self._port:
            return
        logger.info(f"Port changed to {port}, re-establishing session")
        try:
            self.connect_to(port)
        except ConnectivityError as e:
            logger.warning(f"Ignoring port change: {e}")

    def close(self):
        """Close the current session, if any."""
        if self._socket is None:
            return
        self._teardown()
        self._on_session_closed()

    # Socket events -----------------------------------------------------
    def _on_connected(self):
        logger.info(f"Connected to GazeHelpServer on port {self._port}")
        self._set_status(ConnectionState.CONNECTED, banner="")

    def _on_disconnected(self):
        logger.warning("Disconnected from GazeHelpServer")
        self._on_session_closed()

    def _on_error(self, error=None):
        message = self._socket.errorString() if self._socket is not None else str(error)
        logger.error(f"WebSocket error: {message}")
        self._set_status(ConnectionState.ERROR, message=message,
                         banner=CONNECTION_MESSAGES['error'].format(message=message))

    def _on_text_message(self, text: str):
        try:
            payload = self._decode(text)
        except ProtocolError as e:
            self.dropped_messages += 1
            logger.debug(f"Dropping message: {e}")
            return
        self.message_received.emit(payload)

    # Internal ----------------------------------------------------------
    @staticmethod
    def _decode(text: str) -> dict:
        try:
            payload = json.loads(text)
        except (TypeError, ValueError) as e:
            raise ProtocolError(f"Invalid JSON: {e}")
        if not isinstance(payload, dict):
            raise ProtocolError(f"Message is not an object: {text[:80]!r}")
        return payload

    def _on_session_closed(self):
        self._set_status(ConnectionState.DISCONNECTED, banner=CONNECTION_MESSAGES['disconnected'])
        self.reconnect_available.emit(True)

    def _teardown(self):
        socket = self._socket
        if socket is None:
            return
        self._socket = None
        socket.connected.disconnect(self._on_connected)
        socket.disconnected.disconnect(self._on_disconnected)
        socket.textMessageReceived.disconnect(self._on_text_message)
        socket.errorOccurred.disconnect(self._on_error)
        socket.close()
        socket.deleteLater()

    def _set_status(self, state: ConnectionState, message: str = "", banner: str = ""):
        self.status = ConnectionStatus(state, message)
        self.status_changed.emit(self.status)
        if banner != self.banner:
            self.banner = banner
            self.banner_changed.emit(banner)
