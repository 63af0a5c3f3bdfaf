"""Trial/access gate - pure functions over a user's account status.

The gate fails open: a profile in ``trial`` without an end date, or an
unknown status, is treated as not expired.
"""

import math
from datetime import datetime
from typing import Protocol

from halodompet.core.config import get_settings
from halodompet.models.user import AccountStatus

STATUS_LABELS: dict[AccountStatus, str] = {
    AccountStatus.TRIAL: "Masa Percobaan",
    AccountStatus.ACTIVE: "Aktif",
    AccountStatus.EXPIRED: "Kedaluwarsa",
    AccountStatus.BLOCKED: "Diblokir",
}

_SECONDS_PER_DAY = 24 * 60 * 60


class TrialProfile(Protocol):
    account_status: AccountStatus
    trial_ends_at: datetime | None


def is_trial_expired(profile: TrialProfile | None, now: datetime | None = None) -> bool:
    """Whether the account has lost access.

    Args:
        profile: User (or anything with account_status / trial_ends_at)
        now: Reference time (naive UTC), defaults to current time

    Returns:
        True for blocked/expired accounts and trials past their end date
    """
    if profile is None:
        return False

    status = profile.account_status
    if status in (AccountStatus.BLOCKED, AccountStatus.EXPIRED):
        return True
    if status == AccountStatus.ACTIVE:
        return False
    if status == AccountStatus.TRIAL and profile.trial_ends_at is not None:
        now = now or datetime.utcnow()
        return profile.trial_ends_at < now
    return False


def get_days_left(trial_ends_at: datetime | None, now: datetime | None = None) -> int:
    """Days until the trial ends, rounded up. Negative once the date has passed."""
    if trial_ends_at is None:
        return 0
    now = now or datetime.utcnow()
    seconds = (trial_ends_at - now).total_seconds()
    return math.ceil(seconds / _SECONDS_PER_DAY)


def should_show_warning(profile: TrialProfile | None, now: datetime | None = None) -> bool:
    """True iff the user is on trial and it ends within the warning window."""
    if profile is None or profile.account_status != AccountStatus.TRIAL:
        return False
    if profile.trial_ends_at is None:
        return False
    days_left = get_days_left(profile.trial_ends_at, now)
    return 0 < days_left <= get_settings().trial_warning_days


def get_status_label(status: AccountStatus | None) -> str:
    """Indonesian label for an account status."""
    if status is None:
        return "Tidak Diketahui"
    return STATUS_LABELS.get(status, "Tidak Diketahui")
