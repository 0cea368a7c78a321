"""
Error taxonomy for the GazeHelp control core.

None of these conditions is fatal: connectivity problems leave the session
waiting for a manual reconnect, protocol problems drop a single message and
stale host state skips a single update cycle.
"""


class GazeHelpError(Exception):
    """Base class for all GazeHelp errors."""


class ConnectivityError(GazeHelpError):
    """The tracking service session could not be opened or was lost."""


class ProtocolError(GazeHelpError):
    """An inbound message could not be parsed."""


class StaleStateError(GazeHelpError):
    """A host query returned an empty or unexpected value."""
