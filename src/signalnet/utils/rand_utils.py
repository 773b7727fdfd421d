import numpy as np


def weighted_top_k(values: np.ndarray, k: int, rng: np.random.Generator) -> int | None:
    """Pick one of the ``k`` largest positive entries, proportionally to its value.

    Returns:
        The index of the picked entry, or None if fewer than ``k`` entries are positive.
    """
    if len(values) < k:
        return None

    # stable sort keeps the lowest index first among equal values
    top = np.argsort(-values, kind="stable")[:k]
    weights = values[top]
    if np.any(weights <= 0):
        return None

    return int(rng.choice(top, p=weights / np.sum(weights)))
