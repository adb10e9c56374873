"""User-facing notices shown for failures and rejected navigation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final

from simple_tracks.errors import FailureKind


class SettingsAction(Enum):
    """Settings page a notice can offer to open."""

    LOCATION = "location"
    SENSE = "sense"


@dataclass(frozen=True, slots=True)
class Notice:
    """A simple message, optionally with an "open settings" action.

    ``fatal`` notices end the session once acknowledged.
    """

    title: str
    message: str
    settings_action: SettingsAction | None = None
    fatal: bool = False


LOCATION_DISABLED: Final[Notice] = Notice(
    title="Information",
    message=(
        "In order to collect and view tracks of visited places you need to enable location "
        "in system settings. Do you want to open Location settings now?"
    ),
    settings_action=SettingsAction.LOCATION,
)

TRACKING_DISABLED: Final[Notice] = Notice(
    title="Information",
    message=(
        "In order to collect and view tracks of visited places you need to enable 'Places visited' "
        "and set 'Data quality' to detailed in Motion data settings. Do you want to open settings now?"
    ),
    settings_action=SettingsAction.SENSE,
)

# Settings revisions below 2 only have a single motion-data switch.
TRACKING_DISABLED_LEGACY: Final[Notice] = Notice(
    title="Information",
    message=(
        "In order to collect and view tracks of visited places you need to enable Motion data "
        "in Motion data settings. Do you want to open settings now?"
    ),
    settings_action=SettingsAction.SENSE,
)

INCOMPATIBLE_SERVICE: Final[Notice] = Notice(
    title="Information",
    message="This application has become outdated. Please update to the latest version.",
    fatal=True,
)

UNAVAILABLE: Final[Notice] = Notice(
    title="Information",
    message="Unfortunately this device does not support track points of visited places.",
    fatal=True,
)

TRANSIENT_FAILURE: Final[Notice] = Notice(
    title="Tracks",
    message="Track history could not be read right now. Please try again.",
)

TOO_FAR_PAST: Final[Notice] = Notice(
    title="Tracks",
    message="This application displays only tracks of the last seven days.",
)

FUTURE_NOT_ALLOWED: Final[Notice] = Notice(title="Tracks", message="Can't display future tracks.")


def notice_for_failure(kind: FailureKind, settings_version: int = 2) -> Notice:
    """Pick the notice presented for a classified failure."""

    if kind is FailureKind.LOCATION_DISABLED:
        return LOCATION_DISABLED
    if kind is FailureKind.TRACKING_DISABLED:
        return TRACKING_DISABLED_LEGACY if settings_version < 2 else TRACKING_DISABLED
    if kind is FailureKind.INCOMPATIBLE_SERVICE:
        return INCOMPATIBLE_SERVICE
    if kind is FailureKind.UNAVAILABLE:
        return UNAVAILABLE
    return TRANSIENT_FAILURE
