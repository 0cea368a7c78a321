"""
Shared test fixtures for the GazeHelp panel tests.

Provides a process-wide QCoreApplication, an event-pump helper for code that
relies on timers or deferred host replies, and a fake WebSocket that records
what the ConnectionManager does with it.
"""

import sys
import os
import time

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

import pytest
from PyQt6.QtCore import QCoreApplication, QObject, pyqtSignal


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    yield app


def pump_events(duration: float = 0.0):
    """Run the Qt event loop for about ``duration`` seconds (at least one pass)."""
    app = QCoreApplication.instance()
    deadline = time.monotonic() + duration
    app.processEvents()
    while time.monotonic() < deadline:
        time.sleep(0.005)
        app.processEvents()


class FakeWebSocket(QObject):
    """Stand-in for QWebSocket with the signals the ConnectionManager uses."""

    connected = pyqtSignal()
    disconnected = pyqtSignal()
    textMessageReceived = pyqtSignal(str)
    errorOccurred = pyqtSignal(object)

    def __init__(self):
        super().__init__()
        self.url = None
        self.closed = False
        self.error_text = ""

    def open(self, url):
        self.url = url.toString()

    def close(self):
        self.closed = True

    def errorString(self) -> str:
        return self.error_text

    # Helpers for tests
    def fail(self, text: str):
        self.error_text = text
        self.errorOccurred.emit(text)

    def send_json(self, text: str):
        self.textMessageReceived.emit(text)


class SocketFactory:
    """Builds FakeWebSockets and remembers every one it built."""

    def __init__(self):
        self.sockets = []

    def __call__(self):
        socket = FakeWebSocket()
        self.sockets.append(socket)
        return socket

    @property
    def last(self) -> FakeWebSocket:
        return self.sockets[-1]


@pytest.fixture
def socket_factory():
    return SocketFactory()
