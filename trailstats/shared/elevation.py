"""
Elevation processing utilities.

This is the SINGLE SOURCE OF TRUTH for elevation calculations.
"""
import math
from typing import List, Optional, Sequence


# Default smoothing window size (should be odd)
DEFAULT_SMOOTHING_WINDOW = 5


def smooth_elevations(
    elevations: List[float],
    window_size: int = DEFAULT_SMOOTHING_WINDOW
) -> List[float]:
    """
    Smooth elevation data using moving average.

    Args:
        elevations: Raw elevation values
        window_size: Size of smoothing window (odd number recommended)

    Returns:
        Smoothed elevation values (same length as input)
    """
    if window_size <= 1 or len(elevations) < window_size:
        return list(elevations)

    smoothed = []
    half_window = window_size // 2

    for i in range(len(elevations)):
        start = max(0, i - half_window)
        end = min(len(elevations), i + half_window + 1)
        window = elevations[start:end]
        smoothed.append(sum(window) / len(window))

    return smoothed


def naive_elevation_gain(elevations: Sequence[Optional[float]]) -> float:
    """
    Sum of positive deltas between consecutive values.

    Pairs where either side has no elevation are ignored. No noise
    filtering is applied, so this overstates gain on real recordings.
    """
    gain = 0.0

    for ele1, ele2 in zip(elevations, elevations[1:]):
        if ele1 is None or ele2 is None:
            continue
        diff = ele2 - ele1
        if diff > 0:
            gain += diff

    return gain


def median(values: Sequence[float]) -> float:
    """
    Upper median: element at index n // 2 of the sorted values.

    Returns 0.0 for an empty sequence.
    """
    if not values:
        return 0.0
    ordered = sorted(values)
    return ordered[len(ordered) // 2]


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up (2.5 -> 3, -2.5 -> -2), unlike builtin round()."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor
