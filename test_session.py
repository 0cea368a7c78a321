#!/usr/bin/env python3
"""
Integration tests for GazeHelpSession.

Drives the whole control core through a FakeWebSocket and the MockHostBridge:
messages in on the socket, host commands out on the bridge.
"""

import json

import pytest

from conftest import pump_events
from gazehelp.config import PanelSettings
from gazehelp.host_bridge import MockHostBridge
from gazehelp.models import ActiveFeature, QuickToolStatus
from gazehelp.session import GazeHelpSession
from gazehelp.xray import XRayState

STATE = json.dumps({
    "type": "state",
    "data": {
        "gazeTracking": "GazeTracked",
        "userPresence": "Present",
        "screenBounds": {"Width": 1920, "Height": 1080},
    },
})


def gaze(x, y):
    return json.dumps({"type": "gazePoint", "data": {"X": str(x), "Y": str(y)}})


@pytest.fixture
def bridge():
    return MockHostBridge()


@pytest.fixture
def session(bridge, socket_factory):
    session = GazeHelpSession(PanelSettings(), bridge, socket_factory=socket_factory)
    session.start()
    return session


def test_start_activates_default_feature_and_connects(session, socket_factory):
    assert session.context.active_feature is ActiveFeature.XRAY
    assert socket_factory.last.url == "ws://localhost:8898"


def test_messages_flow_from_socket_to_host(session, bridge, socket_factory):
    socket = socket_factory.last
    socket.connected.emit()
    socket.send_json(STATE)

    assert bridge.count("setScreenDimensions") == 1
    assert session.router.stats.state_messages == 1


def test_port_change_reconnects_exactly_once(session, bridge, socket_factory):
    first = socket_factory.last
    first.connected.emit()
    first.send_json(STATE)

    bridge.port = 9000
    first.send_json(gaze(1, 1))

    assert len(socket_factory.sockets) == 2
    assert first.closed
    second = socket_factory.last
    assert second.url == "ws://localhost:9000"

    second.connected.emit()
    second.send_json(gaze(2, 2))
    second.send_json(gaze(3, 3))
    assert len(socket_factory.sockets) == 2


def test_lock_toggle(session):
    changes = []
    session.lock_changed.connect(changes.append)

    assert session.toggle_lock() is True
    assert session.is_locked
    assert session.toggle_lock() is False
    session.set_locked(False)

    assert changes == [True, False]


def test_locking_closes_trigger_on_next_message(session, bridge, socket_factory):
    bridge.active_feature = int(ActiveFeature.QUICK_TOOL)
    socket = socket_factory.last
    socket.send_json(STATE)
    socket.send_json(gaze(1900, 1070))
    assert session.quick_tool.status is QuickToolStatus.TRIGGERED

    session.set_locked(True)
    socket.send_json(gaze(1900, 1070))

    assert bridge.count("closeTrigger") == 1
    assert session.quick_tool.status is QuickToolStatus.CLOSED


def test_open_settings_closes_trigger_first(session, bridge, socket_factory):
    bridge.active_feature = int(ActiveFeature.QUICK_TOOL)
    socket = socket_factory.last
    socket.send_json(STATE)
    socket.send_json(gaze(1900, 1070))

    session.open_settings()

    assert bridge.command_names()[-2:] == ["closeTrigger", "openSettings"]


def test_retry_reconnects_on_current_port(session, socket_factory):
    socket_factory.last.disconnected.emit()
    session.retry()

    assert len(socket_factory.sockets) == 2
    assert socket_factory.last.url == "ws://localhost:8898"


def test_xray_controls(session, bridge, socket_factory):
    socket = socket_factory.last
    socket.send_json(STATE)

    session.press_xray()
    socket.send_json(gaze(640, 360))
    session.release_xray()
    assert session.xray.state is XRayState.ACTIVE

    assert session.set_xray_diameter(150)
    assert not session.set_xray_diameter(5000)
    session.commit_xray_diameter()
    session.clear_xray()

    assert bridge.command_names()[-6:] == [
        "setScreenDimensions", "startCrosshairs", "updateCrosshairs",
        "activateXray", "updateDiameter", "clearXray",
    ]
    assert bridge.diameter == "150"


def test_settings_drive_components(bridge, socket_factory):
    settings = PanelSettings(host="tracker.local", port=7000,
                             default_feature=int(ActiveFeature.PRIVACY_SHIELD),
                             trigger_size='large')
    settings.xray['throttle_ms'] = 120
    session = GazeHelpSession(settings, bridge, socket_factory=socket_factory)
    bridge.active_feature = int(ActiveFeature.PRIVACY_SHIELD)
    bridge.port = 7000
    session.start()

    assert socket_factory.last.url == "ws://tracker.local:7000"
    assert session.context.active_feature is ActiveFeature.PRIVACY_SHIELD
    assert session.xray.throttle_ms == 120

    socket_factory.last.send_json(STATE)
    region = session.context.trigger_region
    assert (region.width, region.height) == (600, 330)


def test_stop_closes_connection(session, socket_factory):
    session.stop()
    assert socket_factory.last.closed
    assert session.connection.banner == "Not connected to GazeHelpServer."


def test_inflight_port_replies_reconnect_exactly_once(socket_factory):
    """Several getPort replies still pending when the port changes yield one reconnect."""
    bridge = MockHostBridge(deferred=True)
    session = GazeHelpSession(PanelSettings(), bridge, socket_factory=socket_factory)
    session.start()
    first = socket_factory.last
    first.connected.emit()

    bridge.port = 9000
    for i in range(3):
        first.send_json(gaze(i, i))
    assert len(socket_factory.sockets) == 1
    pump_events(0.05)

    assert [s.url for s in socket_factory.sockets] == ["ws://localhost:8898", "ws://localhost:9000"]
    assert first.closed

    socket_factory.last.connected.emit()
    socket_factory.last.send_json(gaze(5, 5))
    pump_events(0.05)
    assert len(socket_factory.sockets) == 2


def test_lock_closes_open_popup_with_deferred_replies(socket_factory):
    bridge = MockHostBridge(deferred=True)
    bridge.active_feature = int(ActiveFeature.QUICK_TOOL)
    session = GazeHelpSession(PanelSettings(), bridge, socket_factory=socket_factory)
    session.start()
    socket = socket_factory.last
    socket.send_json(STATE)
    pump_events(0.05)

    socket.send_json(gaze(1900, 1070))
    pump_events(0.05)
    bridge.status = "open"
    socket.send_json(gaze(1900, 1070))
    pump_events(0.05)
    assert session.quick_tool.status is QuickToolStatus.OPEN

    session.set_locked(True)
    socket.send_json(gaze(1900, 1070))
    pump_events(0.05)

    assert bridge.command_names()[-1] == "closeTrigger"
    assert bridge.count("closeTrigger") == 1
    assert session.quick_tool.status is QuickToolStatus.CLOSED
