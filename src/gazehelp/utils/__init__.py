"""
Utility modules for the GazeHelp panel.
"""

from .validation import ValidationUtils, setup_logging

__all__ = ['ValidationUtils', 'setup_logging']
