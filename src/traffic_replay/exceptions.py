"""Custom exception hierarchy for traffic_replay."""

from __future__ import annotations


class ReplayError(Exception):
    """Base exception for all traffic_replay errors."""


class ReplayConfigError(ReplayError):
    """Invalid or missing configuration.

    Covers the reference airport file, the event definition and any scope
    identifier that cannot be resolved.  Always fatal before polling starts.
    """


class FeedError(ReplayError):
    """Failure talking to, or understanding, the live datafeed."""


class FeedTransportError(FeedError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class FeedPayloadError(FeedError):
    """The feed answered with JSON that does not look like a datafeed."""


class ChannelClosedError(ReplayError):
    """Send or receive on a snapshot channel that has been closed."""


class ConsolidationError(ReplayError):
    """A capture file could not be read or the aggregate could not be written.

    Already captured snapshot files are left untouched so consolidation can
    be re-run once the offending file has been inspected.
    """

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        super().__init__(message)
