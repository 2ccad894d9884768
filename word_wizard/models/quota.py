"""Data models for subscription quota."""

from dataclasses import dataclass

UNLIMITED = -1

PLANS = ("free", "pro", "premium", "enterprise")


@dataclass(frozen=True)
class QuotaState:
    """Remaining lookups for a subscription plan.

    A ``limit`` of -1 marks an unlimited plan. ``remaining`` is never
    negative.
    """

    plan: str = "free"
    remaining: int = 100
    limit: int = 100

    def __post_init__(self):
        if self.plan not in PLANS:
            raise ValueError(f"Unknown plan: {self.plan}")
        if self.remaining < 0 and not self.unlimited:
            object.__setattr__(self, "remaining", 0)

    @property
    def unlimited(self) -> bool:
        return self.limit == UNLIMITED

    @property
    def used(self) -> int:
        """Lookups used in the current period (0 for unlimited plans)."""
        if self.unlimited:
            return 0
        return max(0, self.limit - self.remaining)

    def to_dict(self) -> dict:
        return {
            "plan": self.plan,
            "remaining": self.remaining,
            "limit": self.limit,
            "unlimited": self.unlimited,
        }
