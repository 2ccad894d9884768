"""Data models for note service and flashcard service saves."""

from dataclasses import dataclass, field

NOTE_SERVICE = "notion"
FLASHCARD_SERVICE = "anki"


@dataclass(frozen=True)
class SaveResult:
    """Outcome of saving one record to one save target."""

    target: str
    success: bool
    identifier: str | None = None  # Page id or note id on the remote side
    error: str | None = None
    duplicate_detected: bool = False

    def to_dict(self) -> dict:
        return {
            "target": self.target,
            "success": self.success,
            "identifier": self.identifier,
            "error": self.error,
            "duplicate_detected": self.duplicate_detected,
        }


@dataclass(frozen=True)
class DispatchReport:
    """Results of forwarding one record to the enabled save targets."""

    term: str
    results: dict[str, SaveResult] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return all(result.success for result in self.results.values())

    @property
    def errors(self) -> list[str]:
        return [
            f"{name}: {result.error}"
            for name, result in self.results.items()
            if not result.success
        ]

    def to_dict(self) -> dict:
        return {
            "term": self.term,
            "success": self.success,
            "results": {name: result.to_dict() for name, result in self.results.items()},
        }
