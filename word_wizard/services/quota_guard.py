"""Admission control against the subscription quota."""

import logging

from word_wizard.models import QuotaState

logger = logging.getLogger(__name__)


class QuotaGuard:
    """Track remaining lookups for the current plan.

    The guard never raises. Callers check ``can_consume`` before doing
    billable work and call ``consume`` once that work has succeeded.
    Work that has been admitted but not yet committed holds a reservation
    (``reserve``/``release``) so that concurrent admissions cannot spend
    the same units twice.
    """

    def __init__(self, state: QuotaState | None = None, low_ratio: float = 0.2):
        """Initialize the quota guard.

        Args:
            state: Starting quota (defaults to a fresh free plan)
            low_ratio: Fraction of the limit at or below which quota is low
        """
        self._state = state or QuotaState()
        self.low_ratio = low_ratio
        self._reserved = 0

    @property
    def state(self) -> QuotaState:
        return self._state

    @property
    def reserved(self) -> int:
        """Units held by admitted work that has not committed yet."""
        return self._reserved

    def reset(self, state: QuotaState) -> None:
        """Replace the quota, e.g. after a plan change or period reset.

        Reservations of work still in flight are kept.
        """
        self._state = state

    def can_consume(self, units: int = 1, held: int = 0) -> bool:
        """Check whether ``units`` lookups may start.

        Units reserved by other in-flight work are not available.
        Unlimited plans always admit.

        Args:
            units: Units the new work will consume
            held: Units of the current reservations that belong to the caller
        """
        if self._state.unlimited:
            return True
        available = self._state.remaining - (self._reserved - held)
        return available >= max(1, units)

    def reserve(self, units: int) -> None:
        """Hold ``units`` for admitted work until ``release`` is called."""
        self._reserved += units

    def release(self, units: int) -> None:
        self._reserved = max(0, self._reserved - units)

    def consume(self, units: int = 1) -> None:
        """Subtract ``units`` from the remaining quota, clamped at zero."""
        if self._state.unlimited:
            return
        remaining = max(0, self._state.remaining - units)
        self._state = QuotaState(
            plan=self._state.plan, remaining=remaining, limit=self._state.limit
        )
        if self.is_low():
            logger.debug("Quota low: %d of %d left", remaining, self._state.limit)

    def is_low(self) -> bool:
        """True when a limited plan is at or below the low-quota threshold."""
        if self._state.unlimited:
            return False
        return self._state.remaining <= self.low_ratio * self._state.limit
