#!/usr/bin/env python3
"""
Tests for command-line handling of the panel entry point.
"""

from pathlib import Path

from gazehelp.main import main, parse_args


def test_defaults():
    args = parse_args([])
    assert args.host == "localhost"
    assert args.port == 8898
    assert args.feature == 1
    assert args.trigger_size == "medium"
    assert args.log_file is None
    assert not args.verbose


def test_overrides():
    args = parse_args(["--port", "9000", "--host", "tracker.local", "--feature", "0",
                       "--trigger-size", "large", "--log-file", "--verbose"])
    assert args.port == 9000
    assert args.host == "tracker.local"
    assert args.feature == 0
    assert args.trigger_size == "large"
    assert args.log_file == "gazehelp_errors.log"
    assert args.verbose


def test_invalid_port_exits_with_error():
    assert main(["--port", "0"]) == 2


def test_sources_live_under_one_package():
    """Only the gazehelp package is installed; config, utils and main are inside it."""
    src = Path(__file__).parent / "src"
    top_level = sorted(p.name for p in src.iterdir()
                       if p.suffix == ".py" or (p / "__init__.py").exists())
    assert top_level == ["gazehelp"]
    assert main.__module__ == "gazehelp.main"
