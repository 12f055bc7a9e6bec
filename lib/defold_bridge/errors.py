"""
Error types for the Defold editor bridge.

Discovery and dispatch never raise: unreachable editors collapse to
``False`` / ``None``. ``BridgeError`` is reserved for invalid input at the
outer surfaces (CLI arguments, config files, web requests).
"""


class BridgeError(Exception):
    """Invalid user input or configuration."""
