"""Unbiased shuffling and run selection."""
import random
from enum import Enum

ALL = "all"


class PoolMode(Enum):
    ALL = "all"
    CATEGORY = "category"
    UNSEEN = "unseen"
    FAILED = "failed"

    @property
    def negotiates_size(self) -> bool:
        """Unseen and failed runs always take the whole pool."""
        return self in (PoolMode.ALL, PoolMode.CATEGORY)

    @property
    def needs_category(self) -> bool:
        return self in (PoolMode.CATEGORY, PoolMode.UNSEEN)


def shuffle(items, rng: random.Random | None = None) -> list:
    """Return a Fisher-Yates shuffled copy; every permutation is equally likely."""
    rng = rng or random.Random()
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randrange(i + 1)
        result[i], result[j] = result[j], result[i]
    return result


def select(pool, desired_count=None, rng: random.Random | None = None) -> list:
    """Shuffle the pool and keep the first ``min(desired_count, len(pool))``.

    ``None`` or ``"all"`` keeps the whole pool.
    """
    shuffled = shuffle(pool, rng)
    if desired_count is None or desired_count == ALL:
        return shuffled
    return shuffled[:max(0, min(int(desired_count), len(shuffled)))]
