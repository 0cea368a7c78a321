"""
GazeHelp panel entry point.

Runs the control core against the in-process MockHostBridge, which is useful
for exercising a GazeHelpServer installation without the host application.
"""

import sys
import signal
import logging
import argparse

from PyQt6.QtCore import QCoreApplication, QTimer

from .config import (
    APP_NAME, APP_VERSION, DEFAULT_HOST, DEFAULT_PORT, DEFAULT_FEATURE,
    DEFAULT_TRIGGER_SIZE, DEFAULT_LOG_FILE, TRIGGER_SIZES, PanelSettings
)
from .host_bridge import MockHostBridge
from .session import GazeHelpSession
from .utils import ValidationUtils, setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=f"Run the {APP_NAME} panel")
    parser.add_argument("--host", type=str, default=DEFAULT_HOST,
                        help="GazeHelpServer host name")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT,
                        help="GazeHelpServer port")
    parser.add_argument("--feature", type=int, choices=[0, 1, 2], default=DEFAULT_FEATURE,
                        help="Active feature: 0 QuickTool, 1 X-Ray, 2 Privacy Shield")
    parser.add_argument("--trigger-size", choices=sorted(TRIGGER_SIZES), default=DEFAULT_TRIGGER_SIZE,
                        help="QuickTool trigger window size")
    parser.add_argument("--log-file", type=str, nargs="?", const=DEFAULT_LOG_FILE, default=None,
                        help=f"Also write the log to this file (default name: {DEFAULT_LOG_FILE})")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    ok, port = ValidationUtils.validate_port(args.port, "command line")
    if not ok:
        logger.error(f"Invalid port: {args.port}")
        return 2

    app = QCoreApplication(sys.argv[:1])
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)

    settings = PanelSettings(host=args.host, port=port, default_feature=args.feature,
                             trigger_size=args.trigger_size)
    bridge = MockHostBridge()
    bridge.port = port
    bridge.active_feature = args.feature

    session = GazeHelpSession(settings, bridge)
    session.connection.banner_changed.connect(
        lambda text: logger.info(f"Banner: {text}") if text else None)
    app.aboutToQuit.connect(session.stop)
    signal.signal(signal.SIGINT, lambda *_: app.quit())
    # Let the interpreter run periodically so Ctrl+C is noticed
    interrupt_timer = QTimer()
    interrupt_timer.timeout.connect(lambda: None)
    interrupt_timer.start(500)

    logger.info(f"{APP_NAME} {APP_VERSION} starting")
    session.start()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
