"""Outcome Generator — fresh per-category seed values for a new round."""

import random

from app.core.domain_types import OUTCOME_CATEGORIES


def generate_seed_values(
    minimum: int = 0, maximum: int = 9, rng: random.Random | None = None,
) -> dict[str, int]:
    """Uniform draw per category. Pass a seeded rng for reproducible tests."""
    rng = rng or random.Random()
    return {key: rng.randint(minimum, maximum) for key in OUTCOME_CATEGORIES}
