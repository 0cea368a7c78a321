#!/usr/bin/env python3
"""
Tests for the one-time screen calibration.
"""

from gazehelp.context import SessionContext
from gazehelp.host_bridge import MockHostBridge
from gazehelp.models import (
    GazeTracking, ScreenBounds, SystemState, TriggerSizePreset, UserPresence
)
from gazehelp.screen_calibration import ScreenCalibration


def make_state(width=1920, height=1080):
    bounds = ScreenBounds(width, height) if width is not None else None
    return SystemState(GazeTracking.TRACKED, UserPresence.PRESENT, bounds)


def test_calibration_places_trigger_in_bottom_right_corner():
    """Medium preset at scale 1.5 is a 450x270 region flush with the corner."""
    context = SessionContext()
    bridge = MockHostBridge()
    calibration = ScreenCalibration(context, bridge)

    assert calibration.calibrate(make_state())

    assert context.screen.is_set
    assert (context.screen.width, context.screen.height) == (1920, 1080)
    region = context.trigger_region
    assert (region.x, region.y, region.width, region.height) == (1470, 810, 450, 270)
    assert region.right == 1920
    assert region.bottom == 1080
    assert bridge.commands == [("setScreenDimensions", ("1920", "1080", "1.5"))]


def test_calibration_happens_exactly_once():
    context = SessionContext()
    bridge = MockHostBridge()
    calibration = ScreenCalibration(context, bridge)

    assert calibration.calibrate(make_state())
    assert not calibration.calibrate(make_state(2560, 1440))

    assert bridge.count("setScreenDimensions") == 1
    assert context.screen.width == 1920


def test_calibration_waits_for_screen_bounds():
    context = SessionContext()
    bridge = MockHostBridge()
    calibration = ScreenCalibration(context, bridge)

    assert not calibration.calibrate(make_state(width=None))
    assert not calibration.is_set
    assert bridge.calls == []

    assert calibration.calibrate(make_state())
    assert calibration.is_set


def test_calibration_uses_configured_preset_and_scale():
    context = SessionContext()
    bridge = MockHostBridge()
    calibration = ScreenCalibration(context, bridge, preset=TriggerSizePreset.SMALL, scale_factor=2.0)

    calibration.calibrate(make_state(1000, 800))

    region = context.trigger_region
    assert (region.x, region.y, region.width, region.height) == (600, 560, 400, 240)
    assert context.screen.scale_factor == 2.0
    assert bridge.commands == [("setScreenDimensions", ("1000", "800", "2"))]
