class BridgeError(Exception):
    pass


class NetworkError(BridgeError):
    """Timeout, connection failure or non-2xx response from a provider."""


class UpstreamDataError(BridgeError):
    """Provider answered, but the body is malformed or has an unexpected schema."""


class ResolutionError(BridgeError):
    """A token or protocol identity could not be determined by any strategy."""


class AggregationError(BridgeError):
    """Fatal failure in the top-level route comparison."""
