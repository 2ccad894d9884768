"""Quota admission exceptions."""

from .base import WordWizardException


class QuotaExceededError(WordWizardException):
    """Raised when a lookup is refused because the plan's quota is used up."""

    kind = "quota"

    def __init__(self, plan: str, remaining: int, limit: int):
        self.plan = plan
        self.remaining = remaining
        self.limit = limit
        super().__init__(
            f"Quota exceeded on the '{plan}' plan ({remaining} of {limit} lookups left). "
            "Please upgrade your plan or wait for the quota to reset."
        )
