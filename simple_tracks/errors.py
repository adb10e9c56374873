"""Failure taxonomy for calls into the sensing service."""

from __future__ import annotations

from enum import Enum


class FailureKind(Enum):
    """Classified outcome of a failed sensing call."""

    LOCATION_DISABLED = "location_disabled"
    TRACKING_DISABLED = "tracking_disabled"
    INCOMPATIBLE_SERVICE = "incompatible_service"
    UNAVAILABLE = "unavailable"
    TRANSIENT_FAILURE = "transient_failure"

    @property
    def recoverable(self) -> bool:
        """True when the user can fix the cause in system settings."""

        return self in (FailureKind.LOCATION_DISABLED, FailureKind.TRACKING_DISABLED)

    @property
    def fatal(self) -> bool:
        """True when the session cannot continue."""

        return self in (FailureKind.INCOMPATIBLE_SERVICE, FailureKind.UNAVAILABLE)


class TrackFetchError(Exception):
    """A sensing-service failure, classified at the fetch boundary."""

    def __init__(self, kind: FailureKind, cause: BaseException | None = None) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"{kind.value}{detail}")
        self.kind = kind
        self.cause = cause

    @property
    def recoverable(self) -> bool:
        return self.kind.recoverable

    @property
    def fatal(self) -> bool:
        return self.kind.fatal
