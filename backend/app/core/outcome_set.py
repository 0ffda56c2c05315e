"""Outcome Set — per-category result values for the current round.

Invariants:
    - Keys are exactly OUTCOME_CATEGORIES; unknown keys are rejected, never added
    - Values are ints within [minimum, maximum] or None (unassigned)
    - assign() never clears a value; only reset() returns every key to None
    - snapshot() returns a copy — callers can't mutate the live set through it

Design Decisions:
    - Bounds live on the instance (from Settings) so tests can use narrow ranges
    - bool rejected explicitly: isinstance(True, int) is True in Python
"""

from dataclasses import dataclass, field

from app.core.domain_types import OUTCOME_CATEGORIES
from app.core.errors import OutcomeValueError


def _empty_values() -> dict[str, int | None]:
    return {key: None for key in OUTCOME_CATEGORIES}


@dataclass
class OutcomeSet:
    """Mutable mapping category → value with bounds enforcement. No IO."""

    minimum: int = 0
    maximum: int = 9
    values: dict[str, int | None] = field(default_factory=_empty_values)

    def assign(self, category: str, value: int) -> None:
        self._validate(category, value)
        self.values[category] = value

    def update(self, values: dict[str, int]) -> None:
        """Validate every entry first, then assign — all or nothing."""
        for category, value in values.items():
            self._validate(category, value)
        self.values.update(values)

    def _validate(self, category: str, value: int) -> None:
        if category not in self.values:
            raise OutcomeValueError(
                f"Unknown outcome category '{category}'", category,
            )
        if isinstance(value, bool) or not isinstance(value, int):
            raise OutcomeValueError(
                f"Outcome for '{category}' must be an integer", category,
            )
        if not self.minimum <= value <= self.maximum:
            raise OutcomeValueError(
                f"Outcome {value} for '{category}' outside "
                f"[{self.minimum}, {self.maximum}]",
                category,
            )

    def reset(self) -> None:
        self.values = _empty_values()

    def snapshot(self) -> dict[str, int | None]:
        return dict(self.values)

    @property
    def assigned(self) -> dict[str, int]:
        """Only the categories that hold a value."""
        return {k: v for k, v in self.values.items() if v is not None}

    @property
    def is_complete(self) -> bool:
        return all(v is not None for v in self.values.values())
