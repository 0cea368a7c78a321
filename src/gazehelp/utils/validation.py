"""
Validation and Logging Utilities
Centralized value validation and logging setup for the GazeHelp panel.
"""

import logging
from typing import Any, Optional, Tuple

from ..config import MIN_PORT, MAX_PORT, LOG_FORMAT


class ValidationUtils:
    """Centralized validation utilities"""

    @staticmethod
    def validate_numeric_range(value: Any, min_val: float, max_val: float,
                               name: str, context="operation") -> Tuple[bool, Optional[float]]:
        """Validate numeric values are within acceptable ranges"""
        try:
            value = float(value)
            if not (min_val <= value <= max_val):
                logging.warning(f"{context}: {name} value {value} outside range [{min_val}, {max_val}]")
                return False, None
            return True, value
        except (ValueError, TypeError) as e:
            logging.warning(f"{context}: Invalid {name} value: {e}")
            return False, None

    @staticmethod
    def validate_integer_range(value: Any, min_val: int, max_val: int,
                               name: str, context="operation") -> Tuple[bool, Optional[int]]:
        """Like validate_numeric_range, but the value must also be integral"""
        ok, number = ValidationUtils.validate_numeric_range(value, min_val, max_val, name, context)
        if not ok:
            return False, None
        if number != int(number):
            logging.warning(f"{context}: {name} value {number} is not an integer")
            return False, None
        return True, int(number)

    @staticmethod
    def validate_port(value: Any, context="operation") -> Tuple[bool, Optional[int]]:
        """Validate a TCP port number"""
        return ValidationUtils.validate_integer_range(value, MIN_PORT, MAX_PORT, "port", context)


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None):
    """Configure console logging, plus a file log when requested"""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='a'))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
