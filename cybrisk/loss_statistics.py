#!/usr/bin/env python3
"""
CybRisk - Loss Statistics
Reduces a sorted annual-loss vector to percentiles, histogram buckets and a
loss exceedance curve. Every function expects ascending input.
"""

import math
from bisect import bisect_left, bisect_right
from typing import List, Sequence

from .models import DistributionBucket, ExceedancePoint

NUM_BUCKETS = 10
NUM_CURVE_POINTS = 50


def percentile(sorted_losses: Sequence[float], p: float) -> float:
    """Linearly interpolated percentile, p in [0, 1]. Empty input gives 0."""
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"percentile p must be within [0, 1], got {p!r}")
    if not sorted_losses:
        return 0.0

    idx = p * (len(sorted_losses) - 1)
    lower = math.floor(idx)
    upper = math.ceil(idx)
    if lower == upper:
        return sorted_losses[lower]

    fraction = idx - lower
    return sorted_losses[lower] * (1 - fraction) + sorted_losses[upper] * fraction


def format_currency(value: float) -> str:
    """Compact label: $1.2B, $3.4M, $12K, $950, -$2.6M."""
    if value < 0:
        return f"-{format_currency(-value)}"
    if value >= 1_000_000_000:
        return f"${value / 1_000_000_000:.1f}B"
    if value >= 1_000_000:
        return f"${value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"${value / 1_000:.0f}K"
    return f"${value:.0f}"


def build_distribution_buckets(sorted_losses: Sequence[float]) -> List[DistributionBucket]:
    """
    Ten equal-width buckets over [min, max].

    Lower bounds are inclusive, upper bounds exclusive except for the last
    bucket, whose upper bound is the maximum itself, so every loss lands in
    exactly one bucket. Identical losses collapse to one bucket with
    probability 1.0.
    """
    if not sorted_losses:
        return []

    n = len(sorted_losses)
    min_loss = sorted_losses[0]
    max_loss = sorted_losses[-1]

    if min_loss == max_loss:
        return [DistributionBucket(format_currency(min_loss), min_loss, max_loss, 1.0)]

    width = (max_loss - min_loss) / NUM_BUCKETS
    edges = [min_loss + i * width for i in range(NUM_BUCKETS)] + [max_loss]

    buckets = []
    for i in range(NUM_BUCKETS):
        bucket_min, bucket_max = edges[i], edges[i + 1]
        start = bisect_left(sorted_losses, bucket_min)
        if i == NUM_BUCKETS - 1:
            end = n
        else:
            end = bisect_left(sorted_losses, bucket_max)
        buckets.append(DistributionBucket(
            range_label=f"{format_currency(bucket_min)}-{format_currency(bucket_max)}",
            min_value=bucket_min,
            max_value=bucket_max,
            probability=(end - start) / n,
        ))

    return buckets


def build_exceedance_curve(sorted_losses: Sequence[float]) -> List[ExceedancePoint]:
    """
    P(annual loss > threshold) at 50 evenly spaced thresholds from min to max.

    A vector whose values are all identical yields a single point at that
    value with probability 0.
    """
    if not sorted_losses:
        return []

    n = len(sorted_losses)
    min_loss = sorted_losses[0]
    max_loss = sorted_losses[-1]

    if min_loss == max_loss:
        return [ExceedancePoint(loss=min_loss, probability=0.0)]

    last = NUM_CURVE_POINTS - 1
    points = []
    for i in range(NUM_CURVE_POINTS):
        threshold = max_loss if i == last else min_loss + (i / last) * (max_loss - min_loss)
        exceed_count = n - bisect_right(sorted_losses, threshold)
        points.append(ExceedancePoint(loss=threshold, probability=exceed_count / n))

    return points
