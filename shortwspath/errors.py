"""Custom exceptions for shortwspath."""


class ShortWsError(Exception):
    """Base exception for all shortwspath errors."""
    pass


class ConfigError(ShortWsError):
    """Configuration-related error."""
    pass


class ProbeError(ShortWsError):
    """Querying a node for its path length limit failed."""
    pass


class NodeOfflineError(ProbeError):
    """Node has no channel to run a query on."""

    def __init__(self, node_name: str) -> None:
        super().__init__(f"Node is offline: {node_name or '(controller)'}")
        self.node_name = node_name
