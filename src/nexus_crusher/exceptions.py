"""Exceptions raised by collaborators at the edges of the core."""


class NexusCrusherError(Exception):
    """Base class for all nexus_crusher errors."""


class StatsUnavailableError(NexusCrusherError):
    """Champion statistics could not be fetched, loaded from cache, or read from the bundled snapshot."""


class ObserverUnavailableError(NexusCrusherError):
    """The League client is not connected or did not answer in time."""
