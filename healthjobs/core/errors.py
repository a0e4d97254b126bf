"""
Error taxonomy for the aggregation engine.

Adapters raise these internally and convert them into degraded results at
their boundary; only StoreUnavailable and NotFound reach callers.
"""


class AggregatorError(Exception):
    """Base class for every error raised by the engine."""


class UpstreamUnavailable(AggregatorError):
    """Network failure, non-2xx status, or browser launch failure."""


class MalformedResponse(AggregatorError):
    """XML or DOM structure is missing the expected nodes."""


class NavigationTimeout(AggregatorError):
    """A browser navigation or selector wait exceeded its bound."""


class NotFound(AggregatorError):
    """No record across the store, the cache, or any adapter."""


class StoreUnavailable(AggregatorError):
    """The persisted store and its fallback fetch both failed."""
