"""Exception types raised by DazzleTrackLib."""


class TrackingError(Exception):
    """Base class for errors raised by the tracking engine."""
    pass


class ImmutableSourceError(TrackingError, TypeError):
    """Raised when writing through a wrapper whose source was frozen.

    The wrapper of a frozen source reads from a writable copy of it. Writes
    are rejected rather than applied to the copy.
    """

    def __init__(self, operation: str, key, source_type: type):
        self.operation = operation
        self.key = key
        self.source_type = source_type
        super().__init__(
            f"cannot {operation} {key!r} through a wrapper of a frozen "
            f"{source_type.__name__}"
        )


class CycleWithoutMemoError(TrackingError, RecursionError):
    """Raised when a comparison without a memo cache hit the recursion limit.

    The usual cause is a cyclic graph, which needs a memo cache to
    terminate. Acyclic state nested deeper than the interpreter's recursion
    limit, or a property getter that recurses, raises it as well.
    """
    pass


class ConfigurationError(TrackingError, ValueError):
    """Raised when a TrackingConfig fails validation."""
    pass
